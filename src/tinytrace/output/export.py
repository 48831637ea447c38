"""Image export for rendered frames.

Rendered buffers hold unclamped linear colors. Export clamps them to the
displayable [0, 1] range, applies optional gamma encoding and quantizes to
8 bits before handing the pixels to Pillow.

Example:
    >>> from tinytrace.output.export import save_png_from_array
    >>> save_png_from_array(renderer.get_image_numpy(), "output.png")
"""

import logging

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for export.

    Args:
        image: Linear image array of shape (H, W, 3), any range.
        gamma: Gamma correction value. 1.0 leaves values linear.

    Returns:
        8-bit image array of shape (H, W, 3).

    Raises:
        ValueError: If the image is not (H, W, 3) or gamma is not positive.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if gamma <= 0.0:
        raise ValueError(f"Gamma = {gamma} must be positive")

    # NaN would survive clip, map it to black
    clamped = np.clip(np.nan_to_num(image.astype(np.float32), nan=0.0), 0.0, 1.0)

    if gamma != 1.0:
        clamped = np.power(clamped, 1.0 / gamma)

    return (clamped * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    gamma: float = 1.0,
) -> None:
    """Save a linear float image as an 8-bit RGB PNG.

    Args:
        image: Linear image array of shape (H, W, 3), top row first.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value. Default 1.0 (linear).
    """
    image_uint8 = image_to_uint8(image, gamma=gamma)
    pil_image = PILImage.fromarray(image_uint8, mode="RGB")
    pil_image.save(filepath)
    logger.debug("Wrote %dx%d PNG to %s", image.shape[1], image.shape[0], filepath)

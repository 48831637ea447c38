"""Output module for writing rendered images.

Components:
    export: Clamp, gamma-encode and save images as PNG (via Pillow)
"""

from .export import image_to_uint8, save_png_from_array

__all__ = [
    "image_to_uint8",
    "save_png_from_array",
]

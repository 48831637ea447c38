"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -z

The camera maps pixel (i, j) to a ray through the pixel center on an image
plane at unit distance, with the horizontal extent scaled by width / height.

Note: pinhole declares Taichi fields at import time. Import it once Taichi
is initialized:
    from tinytrace.camera.pinhole import PinholeCamera, setup_camera
"""

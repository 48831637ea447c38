"""Scene module for scene management and ray-scene queries.

Components:
    lights: Point light storage
    intersection: Sphere and ground plane storage, nearest-hit and any-hit
        queries, surface material resolution
    manager: SceneManager, the single owner that builds a scene
    presets: The demo scene

Scene data lives in Taichi fields (Structure-of-Arrays layout) preallocated
to fixed capacities, so every module here declares fields at import time.
Import them directly once Taichi is initialized:
    from tinytrace.scene.manager import SceneManager
"""

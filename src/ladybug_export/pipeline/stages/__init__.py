"""Per-frame export stages for the two output modes."""

from .panorama import export_panorama, panorama_path
from .six_camera import camera_image_path, export_camera_images

__all__ = [
    "camera_image_path",
    "export_camera_images",
    "export_panorama",
    "panorama_path",
]

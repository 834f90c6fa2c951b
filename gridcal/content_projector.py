"""
Loads a raster image and projects it through the calibration homography.
"""

import logging

import numpy as np
import cv2  # For perspective warps
import cv3  # For basic I/O
from PIL import Image
from pillow_heif import register_heif_opener  # For HEIC file support

from .transform_settings import TransformSettings, apply_transform_settings

register_heif_opener()


def load_content(file_path):
    """
    Load an image file as an RGB numpy array.

    Raises:
        ValueError: If the file cannot be read as an image
    """
    if file_path.lower().endswith(('.heic', '.heif')):
        # Load HEIC with PIL/pillow-heif, then convert to numpy array for OpenCV
        try:
            with Image.open(file_path) as pil_image:
                return np.array(pil_image.convert('RGB'))
        except OSError as e:
            raise ValueError(f"Could not load HEIC image {file_path}: {e}") from e

    try:
        # cv3 loads images in RGB by default
        image = cv3.imread(file_path)
    except OSError as e:
        raise ValueError(f"Could not load image {file_path}: {e}") from e

    logging.info(f"Loaded content {file_path} ({image.shape[1]}x{image.shape[0]}px)")
    return image


def project_content(surface, image, H, offset=(0, 0), settings=None):
    """
    Warp content onto the surface in place.

    Content pixels are taken as paper-space pixels, so a 96 px wide image
    covers one inch of the calibrated rectangle.

    Args:
        surface: numpy RGB array drawn on in place
        image: numpy RGB content image
        H: Homography from paper space to canvas, or None to skip
        offset: Translation applied after H
        settings: TransformSettings applied to the content first
    """
    if H is None or image is None:
        return surface

    if settings is not None and settings != TransformSettings():
        image = apply_transform_settings(image, settings)

    translate = np.array([[1, 0, offset[0]], [0, 1, offset[1]], [0, 0, 1]], dtype=float)
    M = translate @ np.asarray(H, dtype=float)

    h, w = surface.shape[:2]
    warped = cv2.warpPerspective(image, M, (w, h))
    coverage = cv2.warpPerspective(np.full(image.shape[:2], 255, dtype=np.uint8), M, (w, h),
                                   flags=cv2.INTER_NEAREST)

    mask = coverage > 0
    surface[mask] = warped[mask]
    return surface

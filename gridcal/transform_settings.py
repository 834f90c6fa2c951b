"""
Flip, rotate and invert settings for projected content.

These apply to the content image only, never to the calibration geometry.
"""

from collections import namedtuple

import cv2

TransformSettings = namedtuple(
    "TransformSettings", ["flip_horizontal", "flip_vertical", "degrees", "inverted"])
TransformSettings.__new__.__defaults__ = (False, False, 0, False)

_ROTATIONS = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def toggle_flip_horizontal(settings):
    return settings._replace(flip_horizontal=not settings.flip_horizontal)


def toggle_flip_vertical(settings):
    return settings._replace(flip_vertical=not settings.flip_vertical)


def rotate_cw(settings):
    """Rotate a further 90 degrees clockwise"""
    return settings._replace(degrees=(settings.degrees + 90) % 360)


def toggle_inverted(settings):
    return settings._replace(inverted=not settings.inverted)


def apply_transform_settings(image, settings):
    """
    Apply flips, then rotation, then inversion to an RGB image.

    Args:
        image: numpy array in RGB format
        settings: TransformSettings

    Returns:
        New numpy array; the input is left unchanged
    """
    if settings.degrees % 90 != 0:
        raise ValueError("Rotation must be a multiple of 90 degrees")

    result = image.copy()

    # cv2 flip codes: 1 = around the vertical axis, 0 = around the horizontal axis
    if settings.flip_horizontal:
        result = cv2.flip(result, 1)
    if settings.flip_vertical:
        result = cv2.flip(result, 0)

    rotation = _ROTATIONS.get(settings.degrees % 360)
    if rotation is not None:
        result = cv2.rotate(result, rotation)

    if settings.inverted:
        result = 255 - result

    return result

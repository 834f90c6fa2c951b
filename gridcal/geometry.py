"""
Geometry primitives and the four-point homography estimate.
"""

import logging
from collections import namedtuple
from itertools import combinations

import numpy as np

from .unit_converter import to_pixels

Point = namedtuple("Point", ["x", "y"])

# Relative area below which three corners count as collinear
COLLINEAR_TOLERANCE = 1e-9


class SingularHomographyError(ValueError):
    """Raised when four correspondences do not define a projective transform"""


def _is_degenerate(corners):
    """True if any three of the corners are collinear or coincident"""
    pts = np.asarray(corners, dtype=float)
    extent = np.ptp(pts, axis=0).max()
    if extent == 0:
        return True

    limit = COLLINEAR_TOLERANCE * extent * extent
    for a, b, c in combinations(pts, 3):
        cross = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
        if abs(cross) <= limit:
            return True
    return False


def estimate_homography(src_corners, dst_corners):
    """
    Solve for the projective transform mapping src_corners onto dst_corners.

    Each correspondence (x, y) -> (u, v) contributes two rows of an 8x8
    system in the unknowns h0..h7, with the bottom-right entry fixed at 1:

        u = (h0 x + h1 y + h2) / (h6 x + h7 y + 1)
        v = (h3 x + h4 y + h5) / (h6 x + h7 y + 1)

    Args:
        src_corners: 4 (x, y) points
        dst_corners: 4 (x, y) points

    Returns:
        3x3 numpy array with H[2, 2] == 1

    Raises:
        ValueError: If not given exactly 4 points on each side
        SingularHomographyError: If either side is degenerate
    """
    if len(src_corners) != 4 or len(dst_corners) != 4:
        raise ValueError("Need exactly 4 source and 4 destination points")

    if _is_degenerate(src_corners) or _is_degenerate(dst_corners):
        raise SingularHomographyError("Corners are collinear or coincident")

    A = np.zeros((8, 8))
    b = np.zeros(8)
    for i, ((x, y), (u, v)) in enumerate(zip(src_corners, dst_corners)):
        A[2 * i] = [x, y, 1, 0, 0, 0, -x * u, -y * u]
        A[2 * i + 1] = [0, 0, 0, x, y, 1, -x * v, -y * v]
        b[2 * i] = u
        b[2 * i + 1] = v

    try:
        h = np.linalg.solve(A, b)
    except np.linalg.LinAlgError as e:
        raise SingularHomographyError(str(e)) from e

    if not np.all(np.isfinite(h)):
        raise SingularHomographyError("Homography has non-finite entries")

    return np.append(h, 1.0).reshape(3, 3)


def transform_points(points, H):
    """
    Apply a homography to a sequence of points.

    Returns a new list of Points in the same order.
    """
    if len(points) == 0:
        return []

    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
    mapped = homogeneous @ np.asarray(H, dtype=float).T

    with np.errstate(divide="ignore", invalid="ignore"):
        xy = mapped[:, :2] / mapped[:, 2:3]

    return [Point(float(x), float(y)) for x, y in xy]


def sqrdist(a, b):
    """Squared Euclidean distance between two points"""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def min_index(values):
    """Index of the smallest value, first occurrence on ties"""
    assert len(values) > 0, "min_index needs at least one value"

    best = 0
    for i in range(1, len(values)):
        if values[i] < values[best]:
            best = i
    return best


def interp(a, b, t):
    """
    Linear interpolation a + t * (b - a).

    t == 1 snaps to b exactly, smaller values damp the motion.
    """
    if t == 1:
        return Point(b[0], b[1])
    if t == 0:
        return Point(a[0], a[1])
    return Point(a[0] + t * (b[0] - a[0]), a[1] + t * (b[1] - a[1]))


def paper_corners(width, height, unit):
    """Corners of the nominal width x height rectangle in canvas pixels"""
    w = to_pixels(width, unit)
    h = to_pixels(height, unit)
    return [Point(0.0, 0.0), Point(w, 0.0), Point(w, h), Point(0.0, h)]


def calibration_homography(points, width, height, unit):
    """
    Homography from paper space onto the four calibration points.

    Returns:
        3x3 numpy array, or None when fewer than 4 points are placed or
        the quadrilateral is degenerate
    """
    if len(points) < 4:
        return None

    try:
        return estimate_homography(paper_corners(width, height, unit), list(points)[:4])
    except SingularHomographyError as e:
        logging.warning(f"Skipping degenerate calibration: {e}")
        return None


def to_canvas_point(x, y, offset=(0, 0), device_pixel_ratio=1.0):
    """
    Map a pointer position in logical window coordinates to canvas pixels.

    Args:
        x, y: Pointer position as reported by the windowing system
        offset: Canvas origin in the same logical coordinates
        device_pixel_ratio: Device pixels per logical pixel

    Returns:
        Point in canvas device pixels
    """
    return Point((x - offset[0]) * device_pixel_ratio,
                 (y - offset[1]) * device_pixel_ratio)

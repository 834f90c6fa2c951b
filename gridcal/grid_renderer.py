"""
GridRenderer - Draws the calibration quadrilateral and the measurement grid
through the current homography onto an RGB surface.
"""

import math

import numpy as np
import cv3

from .geometry import Point, transform_points
from .unit_converter import to_pixels

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GREY = (170, 170, 170)
RING_BLUE = (59, 130, 246)

RING_RADIUS = 20
RING_THICKNESS = 4

CALIBRATION_OUTSET = 2
PROJECTION_OUTSET = 8

# Segments are clipped to the surface grown by this many pixels
CLIP_MARGIN = 64


def new_surface(width, height, color=WHITE):
    """Create an RGB drawing surface filled with color"""
    return np.full((int(height), int(width), 3), color, dtype=np.uint8)


def grid_lines(width, height, H, outset, unit):
    """
    Screen-space segments of the unit grid, extended by outset units.

    Vertical lines are emitted for each integer i in [1, width), then
    horizontal lines for each integer i in [1, height).

    Returns:
        List of (Point, Point) tuples
    """
    segments = []

    i = 1
    while i < width:
        segments.append((Point(to_pixels(i, unit), to_pixels(-outset, unit)),
                         Point(to_pixels(i, unit), to_pixels(height + outset, unit))))
        i += 1

    i = 1
    while i < height:
        segments.append((Point(to_pixels(-outset, unit), to_pixels(i, unit)),
                         Point(to_pixels(width + outset, unit), to_pixels(i, unit))))
        i += 1

    if not segments:
        return []

    flat = [p for segment in segments for p in segment]
    mapped = transform_points(flat, H)
    return list(zip(mapped[0::2], mapped[1::2]))


def clip_segment(p1, p2, xmin, ymin, xmax, ymax):
    """
    Clip a segment to an axis-aligned box (Liang-Barsky).

    Returns:
        (Point, Point) inside the box, or None if nothing is visible
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    t0, t1 = 0.0, 1.0

    for p, q in ((-dx, p1[0] - xmin), (dx, xmax - p1[0]),
                 (-dy, p1[1] - ymin), (dy, ymax - p1[1])):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)

    # Ends that were not clipped are returned as given
    start = Point(*p1) if t0 == 0 else Point(p1[0] + t0 * dx, p1[1] + t0 * dy)
    end = Point(*p2) if t1 == 1 else Point(p1[0] + t1 * dx, p1[1] + t1 * dy)
    return start, end


def dash_segment(p1, p2, dash):
    """
    Split a segment into the "on" pieces of a dash pattern.

    Args:
        dash: Sequence of alternating on/off lengths in pixels, or None
              for a solid line
    """
    if not dash:
        return [(p1, p2)]

    length = math.hypot(p2[0] - p1[0], p2[1] - p1[1])
    if length == 0:
        return []

    ux = (p2[0] - p1[0]) / length
    uy = (p2[1] - p1[1]) / length
    pattern = list(dash) if len(dash) % 2 == 0 else list(dash) * 2

    pieces = []
    pos = 0.0
    k = 0
    while pos < length:
        step = pattern[k % len(pattern)]
        if k % 2 == 0:
            end = min(pos + step, length)
            pieces.append((Point(p1[0] + ux * pos, p1[1] + uy * pos),
                           Point(p1[0] + ux * end, p1[1] + uy * end)))
        pos += step
        k += 1
    return pieces


def _last_pixel(a, b):
    """End point of a dash drawn with inclusive raster endpoints"""
    length = math.hypot(b[0] - a[0], b[1] - a[1])
    if length <= 1:
        return a
    scale = (length - 1) / length
    return Point(a[0] + (b[0] - a[0]) * scale, a[1] + (b[1] - a[1]) * scale)


def _stroke(surface, segments, color, thickness=1, dash=None, offset=(0, 0)):
    """Stroke segments onto the surface, translated by offset"""
    h, w = surface.shape[:2]
    for p1, p2 in segments:
        if not all(math.isfinite(v) for v in (*p1, *p2)):
            continue
        p1 = (p1[0] + offset[0], p1[1] + offset[1])
        p2 = (p2[0] + offset[0], p2[1] + offset[1])
        clipped = clip_segment(p1, p2, -CLIP_MARGIN, -CLIP_MARGIN,
                               w + CLIP_MARGIN, h + CLIP_MARGIN)
        if clipped is None:
            continue
        for a, b in dash_segment(clipped[0], clipped[1], dash):
            if dash:
                b = _last_pixel(a, b)
            cv3.line(surface, int(round(a[0])), int(round(a[1])),
                     int(round(b[0])), int(round(b[1])), color=color, t=thickness)


def _stroke_blended(surface, segments, color, alpha, thickness=1, dash=None, offset=(0, 0)):
    """Stroke segments with a translucent color"""
    mask = np.zeros(surface.shape[:2], dtype=np.uint8)
    _stroke(mask, segments, 255, thickness, dash, offset)
    hit = mask > 0
    blended = surface[hit] * (1.0 - alpha) + np.array(color, dtype=float) * alpha
    surface[hit] = np.clip(blended, 0, 255).astype(np.uint8)


def draw_grid(surface, width, height, H, outset, unit,
              color=WHITE, thickness=1, dash=None, offset=(0, 0)):
    """Draw the unit grid through H onto the surface"""
    _stroke(surface, grid_lines(width, height, H, outset, unit),
            color, thickness, dash, offset)


def polygon_edges(points):
    """Closed polygon edges, starting from the last point"""
    if len(points) < 2:
        return []
    return [(points[i - 1], points[i]) for i in range(len(points))]


class GridRenderer:
    """
    Redraws the whole calibration view from the current state.

    Two display modes are supported:
    - calibrating: filled quadrilateral, dashed outer grid, crisp inner grid
      and a ring around the selected handle
    - projecting: outlined quadrilateral and a faint grid over the content
    """

    def draw(self, surface, points, width, height, H, unit,
             is_calibrating=True, selected=None, offset=(0, 0), grid_on=True):
        """
        Draw onto surface in place.

        Args:
            surface: numpy RGB array
            points: Calibration points in canvas pixels
            width, height: Nominal dimensions in unit
            H: Homography from paper space to canvas, or None to skip the grid
            unit: Active measurement unit
            is_calibrating: Display mode
            selected: Index of the point being modified, or None
            offset: Translation applied to everything drawn
            grid_on: Whether the grid is shown while projecting
        """
        if is_calibrating:
            self._draw_calibration(surface, points, width, height, H, unit, selected, offset)
        else:
            self._draw_projection(surface, points, width, height, H, unit, offset, grid_on)
        return surface

    def _draw_calibration(self, surface, points, width, height, H, unit, selected, offset):
        if len(points) >= 3:
            shifted = [(p[0] + offset[0], p[1] + offset[1]) for p in points]
            cv3.fill_poly(surface, np.round(shifted).astype(np.int32), color=BLACK)

        if H is not None:
            draw_grid(surface, width, height, H, CALIBRATION_OUTSET, unit,
                      color=BLACK, dash=(3, 1), offset=offset)
            draw_grid(surface, width, height, H, 0, unit, color=WHITE, offset=offset)

        if selected is not None and 0 <= selected < len(points):
            pt = points[selected]
            cv3.circle(surface, int(round(pt[0] + offset[0])), int(round(pt[1] + offset[1])),
                       RING_RADIUS, color=RING_BLUE, t=RING_THICKNESS)

    def _draw_projection(self, surface, points, width, height, H, unit, offset, grid_on):
        edges = polygon_edges(points)
        _stroke(surface, edges, BLACK, thickness=5, offset=offset)
        _stroke(surface, edges, WHITE, thickness=1, dash=(4, 4), offset=offset)

        if H is None or not grid_on:
            return

        draw_grid(surface, width, height, H, PROJECTION_OUTSET, unit,
                  color=BLACK, dash=(1, 1), offset=offset)
        _stroke_blended(surface, grid_lines(width, height, H, 0, unit),
                        GREY, 0x88 / 255, dash=(3, 1), offset=offset)

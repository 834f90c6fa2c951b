"""
Gridcal library modules - perspective calibration, grid rendering and
point editing.
"""

from .unit_converter import UnitConverter, to_pixels, INCHES, CENTIMETERS
from .geometry import (
    Point,
    SingularHomographyError,
    estimate_homography,
    transform_points,
    sqrdist,
    min_index,
    interp,
    calibration_homography,
    to_canvas_point,
)
from .grid_renderer import GridRenderer, draw_grid, grid_lines
from .point_editor import PointEditor, EditorState, Event, reduce
from .point_store import PointStore
from .transform_settings import TransformSettings, apply_transform_settings

__all__ = [
    'UnitConverter',
    'to_pixels',
    'INCHES',
    'CENTIMETERS',
    'Point',
    'SingularHomographyError',
    'estimate_homography',
    'transform_points',
    'sqrdist',
    'min_index',
    'interp',
    'calibration_homography',
    'to_canvas_point',
    'GridRenderer',
    'draw_grid',
    'grid_lines',
    'PointEditor',
    'EditorState',
    'Event',
    'reduce',
    'PointStore',
    'TransformSettings',
    'apply_transform_settings',
]

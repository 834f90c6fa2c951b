"""
Composes one full frame: projected content, quadrilateral, grid and handles.
"""

from .content_projector import project_content
from .geometry import calibration_homography
from .grid_renderer import GridRenderer, new_surface


def render_frame(size, points, width, height, unit, is_calibrating=True, selected=None,
                 offset=(0, 0), grid_on=True, content=None, settings=None, renderer=None):
    """
    Redraw everything from scratch for the current state.

    Args:
        size: (width, height) of the surface in device pixels
        points: Calibration points in canvas pixels
        width, height: Nominal paper dimensions in unit
        content: Optional RGB image shown while projecting
        settings: TransformSettings for the content

    Returns:
        numpy RGB array
    """
    if renderer is None:
        renderer = GridRenderer()

    surface = new_surface(size[0], size[1])
    H = calibration_homography(points, width, height, unit)

    if not is_calibrating and content is not None:
        project_content(surface, content, H, offset, settings)

    renderer.draw(surface, points, width, height, H, unit,
                  is_calibrating=is_calibrating, selected=selected,
                  offset=offset, grid_on=grid_on)
    return surface

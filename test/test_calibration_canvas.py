"""
Tests for routing canvas events into the point editor
"""

from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")

from gridcal.calibration_canvas import CalibrationCanvas  # noqa: E402
from gridcal.geometry import Point  # noqa: E402
from gridcal.point_editor import PointEditor  # noqa: E402


class FakeCanvas:
    def __init__(self, width=400, height=300):
        self.bindings = {}
        self.width = width
        self.height = height

    def bind(self, sequence, handler):
        self.bindings[sequence] = handler

    def focus_set(self):
        pass

    def winfo_width(self):
        return self.width

    def winfo_height(self):
        return self.height


def event(x=0, y=0, state=0, keysym=""):
    return SimpleNamespace(x=x, y=y, state=state, keysym=keysym)


def test_events_are_scaled_by_device_pixel_ratio():
    canvas = FakeCanvas()
    editor = PointEditor()
    CalibrationCanvas(canvas, editor, offset=(5, 5), device_pixel_ratio=2.0)

    canvas.bindings["<ButtonPress-1>"](event(15, 25))
    assert editor.points == (Point(20, 40),)


def test_drag_and_nudge_through_bindings():
    canvas = FakeCanvas()
    editor = PointEditor(points=[Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)])
    CalibrationCanvas(canvas, editor)

    canvas.bindings["<ButtonPress-1>"](event(95, 2))
    canvas.bindings["<B1-Motion>"](event(120, 10))
    canvas.bindings["<ButtonRelease-1>"](event(120, 10))
    canvas.bindings["<Left>"](event(keysym="Left"))

    assert editor.selected == 1
    assert editor.points[1] == Point(119, 10)


def test_disabled_canvas_ignores_input():
    canvas = FakeCanvas()
    editor = PointEditor()
    calibration_canvas = CalibrationCanvas(canvas, editor)
    calibration_canvas.enabled = False

    canvas.bindings["<ButtonPress-1>"](event(1, 1))
    assert editor.points == ()


def test_size_in_device_pixels():
    calibration_canvas = CalibrationCanvas(FakeCanvas(400, 300), PointEditor(), device_pixel_ratio=1.5)
    assert calibration_canvas.get_size() == (600, 450)

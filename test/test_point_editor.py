"""
Tests for the calibration point state machine
"""

import pytest

from gridcal.geometry import Point
from gridcal.point_editor import (
    KEY_DOWN,
    MOUSE_DOWN,
    MOUSE_MOVE,
    MOUSE_UP,
    RESET,
    TOUCH_END,
    EditorState,
    Event,
    PointEditor,
    initial_state,
    phase,
    reduce,
)

CORNERS = [Point(0, 0), Point(100, 0), Point(100, 100), Point(0, 100)]


class RecordingStore:
    def __init__(self):
        self.saved = []

    def save(self, points):
        self.saved.append(tuple(points))
        return True


def placed_editor(store=None):
    editor = PointEditor(store=store)
    for p in CORNERS:
        editor.pointer_down(p)
    return editor


def test_scenario_place_select_drag():
    editor = PointEditor()
    assert editor.get_phase() == "empty"

    for count, p in enumerate(CORNERS, start=1):
        editor.pointer_down(p)
        assert len(editor.points) == count
    assert editor.points == tuple(CORNERS)
    assert editor.get_phase() == "ready"

    editor.pointer_down(Point(1, 1))
    assert editor.selected == 0
    assert editor.get_phase() == "dragging"

    editor.pointer_move(Point(5, 5))
    assert editor.points[0] == Point(5, 5)


def test_placing_phase():
    editor = PointEditor()
    editor.pointer_down(Point(3, 4))
    assert editor.get_phase() == "placing"


def test_never_more_than_four_points():
    editor = placed_editor()
    for i in range(10):
        editor.pointer_down(Point(i * 7, i * 3))
        assert len(editor.points) == 4
    assert editor.points == tuple(CORNERS)


def test_nearest_point_selected():
    editor = placed_editor()
    editor.pointer_down(Point(90, 95))
    assert editor.selected == 2


def test_tie_selects_lowest_index():
    editor = placed_editor()
    editor.pointer_down(Point(50, 50))
    assert editor.selected == 0


def test_move_without_selection_is_noop():
    editor = placed_editor()
    editor.pointer_move(Point(40, 40))
    assert editor.points == tuple(CORNERS)


def test_move_without_button_persists_and_keeps_selection():
    store = RecordingStore()
    editor = placed_editor(store)
    editor.pointer_down(Point(99, 1))
    editor.pointer_move(Point(50, 50), buttons_held=False)
    assert editor.selected == 1
    assert editor.points == tuple(CORNERS)
    assert store.saved == [tuple(CORNERS)]


def test_mouse_up_persists_and_keeps_selection():
    store = RecordingStore()
    editor = placed_editor(store)
    editor.pointer_down(Point(99, 1))
    editor.pointer_move(Point(110, -10))
    editor.pointer_up()
    assert editor.selected == 1
    assert store.saved[-1][1] == Point(110, -10)


def test_touch_smoothing_and_release():
    store = RecordingStore()
    editor = PointEditor(store=store, points=CORNERS)
    editor.touch_start(Point(2, 2))
    assert editor.selected == 0

    editor.touch_move(Point(100, 100))
    assert editor.points[0] == pytest.approx((5, 5))

    editor.touch_end()
    assert editor.selected is None
    assert len(store.saved) == 1


def test_touch_start_places_points():
    editor = PointEditor()
    editor.touch_start(Point(1, 2))
    assert editor.points == (Point(1, 2),)


@pytest.mark.parametrize("key,expected", [
    ("Left", Point(99, 100)),
    ("Right", Point(101, 100)),
    ("Up", Point(100, 99)),
    ("Down", Point(100, 101)),
    ("ArrowDown", Point(100, 101)),
])
def test_arrow_keys_nudge_selected_point(key, expected):
    editor = placed_editor()
    editor.pointer_down(Point(98, 98))
    editor.key_down(key)
    assert editor.points[2] == expected


def test_keys_without_selection_do_nothing():
    editor = placed_editor()
    editor.key_down("Left")
    editor.key_down("a")
    assert editor.points == tuple(CORNERS)


def test_reset_empties_points_and_selection():
    editor = placed_editor()
    editor.pointer_down(Point(0, 0))
    editor.reset()
    assert editor.points == ()
    assert editor.selected is None
    assert editor.get_phase() == "empty"


def test_callbacks_fire_on_change_only():
    point_updates = []
    selection_updates = []
    editor = PointEditor(on_points_changed=point_updates.append,
                         on_selection_changed=selection_updates.append)
    for p in CORNERS:
        editor.pointer_down(p)
    assert len(point_updates) == 4

    editor.pointer_down(Point(0, 1))
    editor.pointer_down(Point(0, 2))
    assert selection_updates == [0]

    editor.pointer_up()
    assert len(point_updates) == 4


def test_restored_points_are_truncated():
    editor = PointEditor(points=CORNERS + [Point(7, 7)])
    assert editor.points == tuple(CORNERS)
    assert editor.get_phase() == "ready"


def test_reducer_is_pure():
    state = initial_state(CORNERS)._replace(selected=3)
    next_state, persist = reduce(state, Event(MOUSE_MOVE, Point(9, 9), True))
    assert state.points[3] == Point(0, 100)
    assert next_state.points[3] == Point(9, 9)
    assert persist is False


def test_reducer_persist_flags():
    state = initial_state(CORNERS)
    assert reduce(state, Event(MOUSE_UP))[1] is True
    assert reduce(state, Event(TOUCH_END))[1] is True
    assert reduce(state, Event(MOUSE_DOWN, Point(0, 0)))[1] is False
    assert reduce(state, Event(KEY_DOWN, key="Up"))[1] is False
    assert reduce(state, Event(RESET)) == (EditorState((), None), False)


def test_phase_names():
    assert phase(EditorState((), None)) == "empty"
    assert phase(EditorState(tuple(CORNERS[:2]), None)) == "placing"
    assert phase(EditorState(tuple(CORNERS), None)) == "ready"
    assert phase(EditorState(tuple(CORNERS), 1)) == "dragging"


def test_unknown_event_kind():
    with pytest.raises(ValueError):
        reduce(initial_state(), Event("wheel"))

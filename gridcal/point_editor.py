"""
PointEditor - Places, selects, drags and nudges the four calibration points.

All transitions go through reduce(), which takes the current EditorState
and an Event and returns the next state. PointEditor owns the state and
performs the side effects (callbacks and persistence).
"""

import logging
from collections import namedtuple

from .geometry import Point, interp, min_index, sqrdist

MAX_POINTS = 4  # One point per corner of the rectangle

MOUSE_FILTER = 1.0
TOUCH_FILTER = 0.05

MOUSE_DOWN = "mouse_down"
MOUSE_MOVE = "mouse_move"
MOUSE_UP = "mouse_up"
TOUCH_START = "touch_start"
TOUCH_MOVE = "touch_move"
TOUCH_END = "touch_end"
KEY_DOWN = "key_down"
RESET = "reset"

NUDGES = {
    "Left": (-1, 0),
    "Up": (0, -1),
    "Right": (1, 0),
    "Down": (0, 1),
    "ArrowLeft": (-1, 0),
    "ArrowUp": (0, -1),
    "ArrowRight": (1, 0),
    "ArrowDown": (0, 1),
}

EditorState = namedtuple("EditorState", ["points", "selected"])

Event = namedtuple("Event", ["kind", "point", "buttons_held", "key"])
Event.__new__.__defaults__ = (None, False, None)


def initial_state(points=()):
    """State with the given (restored) points and nothing selected"""
    return EditorState(tuple(Point(*p) for p in list(points)[:MAX_POINTS]), None)


def phase(state):
    """Name of the editor phase: empty, placing, ready or dragging"""
    if state.selected is not None:
        return "dragging"
    if len(state.points) == 0:
        return "empty"
    if len(state.points) < MAX_POINTS:
        return "placing"
    return "ready"


def _down(state, point):
    if len(state.points) < MAX_POINTS:
        return state._replace(points=state.points + (Point(*point),))
    distances = [sqrdist(p, point) for p in state.points]
    return state._replace(selected=min_index(distances))


def _move(state, point, smoothing):
    i = state.selected
    if i is None or i >= len(state.points):
        return state
    points = list(state.points)
    points[i] = interp(points[i], point, smoothing)
    return state._replace(points=tuple(points))


def _nudge(state, key):
    i = state.selected
    step = NUDGES.get(key)
    if i is None or step is None or i >= len(state.points):
        return state
    points = list(state.points)
    points[i] = Point(points[i].x + step[0], points[i].y + step[1])
    return state._replace(points=tuple(points))


def reduce(state, event):
    """
    Apply one input event.

    Args:
        state: Current EditorState
        event: Event to apply

    Returns:
        tuple: (next EditorState, bool whether points should be persisted)
    """
    kind = event.kind

    if kind in (MOUSE_DOWN, TOUCH_START):
        return _down(state, event.point), False

    if kind == MOUSE_MOVE:
        if not event.buttons_held:
            # No button held means the release happened outside the canvas
            return state, True
        return _move(state, event.point, MOUSE_FILTER), False

    if kind == TOUCH_MOVE:
        return _move(state, event.point, TOUCH_FILTER), False

    if kind == MOUSE_UP:
        return state, True

    if kind == TOUCH_END:
        return state._replace(selected=None), True

    if kind == KEY_DOWN:
        return _nudge(state, event.key), False

    if kind == RESET:
        return EditorState((), None), False

    raise ValueError(f"Unknown event kind: {kind!r}")


class PointEditor:
    """
    Single owner of the calibration points and the selection.

    Callbacks fire only when the corresponding value changes.
    """

    def __init__(self, store=None, points=(), on_points_changed=None, on_selection_changed=None):
        """
        Initialize the editor.

        Args:
            store: Object with save(points), or None to skip persistence
            points: Points restored from a previous session
            on_points_changed: function(points) called after points change
            on_selection_changed: function(index or None) called after selection changes
        """
        self.store = store
        self.state = initial_state(points)
        self.on_points_changed = on_points_changed
        self.on_selection_changed = on_selection_changed

    @property
    def points(self):
        return self.state.points

    @property
    def selected(self):
        return self.state.selected

    def get_phase(self):
        return phase(self.state)

    def dispatch(self, event):
        """Apply an event, notify listeners and persist when required"""
        previous = self.state
        self.state, persist = reduce(previous, event)

        if self.state.points != previous.points and self.on_points_changed:
            self.on_points_changed(self.state.points)
        if self.state.selected != previous.selected and self.on_selection_changed:
            self.on_selection_changed(self.state.selected)

        if persist:
            self.persist()
        return self.state

    def persist(self):
        if self.store is None:
            return
        logging.debug(f"Saving {len(self.state.points)} calibration points")
        self.store.save(self.state.points)

    def pointer_down(self, point):
        return self.dispatch(Event(MOUSE_DOWN, point))

    def pointer_move(self, point, buttons_held=True):
        return self.dispatch(Event(MOUSE_MOVE, point, buttons_held))

    def pointer_up(self):
        return self.dispatch(Event(MOUSE_UP))

    def touch_start(self, point):
        return self.dispatch(Event(TOUCH_START, point))

    def touch_move(self, point):
        return self.dispatch(Event(TOUCH_MOVE, point))

    def touch_end(self):
        return self.dispatch(Event(TOUCH_END))

    def key_down(self, key):
        return self.dispatch(Event(KEY_DOWN, key=key))

    def reset(self):
        return self.dispatch(Event(RESET))

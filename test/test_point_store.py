"""
Tests for persisting calibration points
"""

import json

from gridcal.geometry import Point
from gridcal.point_editor import PointEditor
from gridcal.point_store import PointStore

CORNERS = [Point(0, 0), Point(100.5, 0), Point(100, 100), Point(0, 100)]


def test_save_and_load(tmp_path):
    store = PointStore(str(tmp_path / "nested" / "state.json"))
    assert store.save(CORNERS) is True
    assert store.load() == CORNERS


def test_file_format_is_flat_point_list(tmp_path):
    path = tmp_path / "state.json"
    PointStore(str(path)).save(CORNERS[:2])
    assert json.loads(path.read_text()) == {"points": [{"x": 0.0, "y": 0.0}, {"x": 100.5, "y": 0.0}]}


def test_other_keys_are_kept(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"unit": "cm"}))
    PointStore(str(path)).save(CORNERS)
    data = json.loads(path.read_text())
    assert data["unit"] == "cm"
    assert len(data["points"]) == 4


def test_missing_file_loads_empty(tmp_path):
    assert PointStore(str(tmp_path / "absent.json")).load() == []


def test_malformed_file_loads_empty(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json")
    assert PointStore(str(path)).load() == []

    path.write_text(json.dumps({"points": [{"x": 1}]}))
    assert PointStore(str(path)).load() == []


def test_load_truncates_to_four(tmp_path):
    path = tmp_path / "state.json"
    records = [{"x": i, "y": i} for i in range(6)]
    path.write_text(json.dumps({"points": records}))
    assert len(PointStore(str(path)).load()) == 4


def test_failed_write_is_not_fatal(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = PointStore(str(blocker / "state.json"))
    assert store.save(CORNERS) is False

    editor = PointEditor(store=store, points=CORNERS)
    editor.pointer_down(Point(1, 1))
    editor.pointer_move(Point(3, 3))
    editor.pointer_up()
    assert editor.points[0] == Point(3, 3)


def test_editor_release_writes_store(tmp_path):
    store = PointStore(str(tmp_path / "state.json"))
    editor = PointEditor(store=store)
    for p in CORNERS:
        editor.pointer_down(p)
    editor.pointer_up()
    assert PointStore(str(tmp_path / "state.json")).load() == CORNERS


def test_unchanged_points_are_not_rewritten(tmp_path, monkeypatch):
    store = PointStore(str(tmp_path / "state.json"))
    editor = PointEditor(store=store, points=CORNERS)
    editor.pointer_up()

    reads = []
    read_all = store._read_all
    monkeypatch.setattr(store, "_read_all", lambda: reads.append(1) or read_all())

    # Hovering with no button held asks to persist on every motion
    for x in range(10):
        editor.pointer_move(Point(x, x), buttons_held=False)
    assert reads == []

    editor.pointer_down(Point(1, 1))
    editor.pointer_move(Point(5, 5))
    editor.pointer_move(Point(6, 6), buttons_held=False)
    assert len(reads) == 1
    assert PointStore(str(tmp_path / "state.json")).load()[0] == Point(5, 5)


def test_loaded_points_are_not_rewritten(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"points": [{"x": p.x, "y": p.y} for p in CORNERS]}, indent=2))
    text = path.read_text()

    store = PointStore(str(path))
    store.save(store.load())
    assert path.read_text() == text
    assert store.save(CORNERS[:3]) is True
    assert len(json.loads(path.read_text())["points"]) == 3

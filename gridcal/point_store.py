"""
PointStore - Keeps the calibration points between sessions in a small
JSON key/value file.
"""

import json
import logging
import os

from .geometry import Point

DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".gridcal", "state.json")
POINTS_KEY = "points"
MAX_POINTS = 4


class PointStore:
    """
    Persists the point list as [{"x": .., "y": ..}, ...] under one key.

    Writes are best-effort: failures are logged and never raised, so the
    calibration stays usable in memory. Saving the points last written or
    loaded again does not touch the file.
    """

    def __init__(self, path=DEFAULT_PATH, key=POINTS_KEY):
        self.path = path
        self.key = key
        self.last_saved = None

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("State file does not hold an object")
        return data

    def load(self):
        """
        Read the stored points.

        Returns:
            List of at most 4 Points, empty if nothing usable is stored
        """
        try:
            records = self._read_all().get(self.key, [])
            points = [Point(float(r["x"]), float(r["y"])) for r in records]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logging.warning(f"Could not restore calibration from {self.path}: {e}")
            return []

        if len(points) > MAX_POINTS:
            logging.warning(f"Ignoring {len(points) - MAX_POINTS} extra stored points")
        points = points[:MAX_POINTS]
        self.last_saved = tuple(points)
        return points

    def save(self, points):
        """
        Write the points, keeping any other keys in the file.

        Returns:
            bool: True if the write succeeded
        """
        points = tuple(Point(float(p[0]), float(p[1])) for p in points)
        if points == self.last_saved:
            return True

        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            logging.warning(f"Overwriting unreadable state file {self.path}: {e}")
            data = {}

        data[self.key] = [{"x": float(p[0]), "y": float(p[1])} for p in points]

        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f)
        except OSError as e:
            logging.error(f"Failed to save calibration to {self.path}: {e}")
            return False
        self.last_saved = points
        return True

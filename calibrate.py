"""
Calibrate - Projector Perspective Calibration Tool
Place 4 corner points on the projection surface, then drag them until the
projected grid matches a ruler. Switch to projecting to show content
through the same calibration.
"""

import argparse
import logging
import tkinter as tk

import cv3  # For writing exported frames

from gridcal.calibration_canvas import CalibrationCanvas
from gridcal.content_projector import load_content
from gridcal.frame import render_frame
from gridcal.point_editor import PointEditor
from gridcal.point_store import DEFAULT_PATH, PointStore
from gridcal.transform_settings import (
    TransformSettings,
    rotate_cw,
    toggle_flip_horizontal,
    toggle_flip_vertical,
    toggle_inverted,
)
from gridcal.unit_converter import CENTIMETERS, INCHES, UnitConverter, parse_unit

PHASE_MESSAGES = {
    "empty": "Click the top-left corner of the surface.",
    "placing": "Point {count}/4 added. Next: {label}.",
    "ready": "All 4 points placed. Click near a point to adjust it.",
    "dragging": "Drag point {index} or nudge it with the arrow keys.",
}
CORNER_LABELS = ["top-left", "top-right", "bottom-right", "bottom-left"]


def status_text(editor, converter, width, height, is_calibrating):
    """
    Status line for the current editor state.

    The selected point's canvas position is reported in the active unit.
    """
    unit_label = converter.get_unit_label()
    mode = "Calibrating" if is_calibrating else "Projecting"
    count = len(editor.points)
    message = PHASE_MESSAGES[editor.get_phase()].format(
        count=count,
        label=CORNER_LABELS[min(count, 3)],
        index=editor.selected,
    )
    text = f"{mode} {width}x{height}{unit_label} | {message}"

    if editor.selected is not None:
        point = editor.points[editor.selected]
        x = converter.pixels_to_units(point.x)
        y = converter.pixels_to_units(point.y)
        text += f" ({x:.2f}, {y:.2f}) {unit_label}"
    return text


class CalibrateGUI:
    def __init__(self, root, width=24, height=18, units="inches", store=None,
                 device_pixel_ratio=1.0, calibrating=True, content=None):
        self.root = root
        self.root.title("Calibrate")

        # Nominal paper size in the active unit
        self.width = width
        self.height = height
        self.converter = UnitConverter(units)

        # Display state
        self.is_calibrating = calibrating
        self.grid_on = True
        self.transform_settings = TransformSettings()
        self.content = content

        self.store = store
        restored = store.load() if store is not None else []
        self.editor = PointEditor(
            store=store,
            points=restored,
            on_points_changed=lambda points: self.redraw(),
            on_selection_changed=lambda index: self.redraw(),
        )

        self.setup_ui(device_pixel_ratio)
        self.redraw()

    def setup_ui(self, device_pixel_ratio):
        self.status_label = tk.Label(self.root, anchor=tk.W)
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X)

        self.canvas = tk.Canvas(self.root, bg="black", highlightthickness=0,
                                width=int(self.root.winfo_screenwidth() * 0.8),
                                height=int(self.root.winfo_screenheight() * 0.8))
        self.canvas.pack(fill=tk.BOTH, expand=True)
        self.canvas.config(cursor="crosshair")

        self.calibration_canvas = CalibrationCanvas(
            self.canvas, self.editor, device_pixel_ratio=device_pixel_ratio)
        self.calibration_canvas.enabled = self.is_calibrating

        self.canvas.bind("<Configure>", lambda event: self.redraw())
        self.root.bind("<Key-c>", lambda event: self.toggle_mode())
        self.root.bind("<Key-r>", lambda event: self.reset_points())
        self.root.bind("<Key-g>", lambda event: self.toggle_grid())
        self.root.bind("<Key-u>", lambda event: self.toggle_units())
        self.root.bind("<Key-h>", lambda event: self.update_settings(toggle_flip_horizontal))
        self.root.bind("<Key-v>", lambda event: self.update_settings(toggle_flip_vertical))
        self.root.bind("<Key-o>", lambda event: self.update_settings(rotate_cw))
        self.root.bind("<Key-i>", lambda event: self.update_settings(toggle_inverted))

    def toggle_mode(self):
        self.is_calibrating = not self.is_calibrating
        self.calibration_canvas.enabled = self.is_calibrating
        logging.info("Calibrating" if self.is_calibrating else "Projecting")
        self.redraw()

    def toggle_grid(self):
        self.grid_on = not self.grid_on
        self.redraw()

    def toggle_units(self):
        self.converter.set_units(CENTIMETERS if self.converter.units == INCHES else INCHES)
        logging.info(f"Units: {self.converter.get_unit_label()}")
        self.redraw()

    def update_settings(self, change):
        if self.is_calibrating:
            return
        self.transform_settings = change(self.transform_settings)
        self.redraw()

    def reset_points(self):
        self.editor.reset()
        self.editor.persist()

    def update_status(self):
        self.status_label.config(text=status_text(
            self.editor, self.converter, self.width, self.height, self.is_calibrating))

    def redraw(self):
        size = self.calibration_canvas.get_size()
        surface = render_frame(
            size,
            self.editor.points,
            self.width,
            self.height,
            self.converter.units,
            is_calibrating=self.is_calibrating,
            selected=self.editor.selected,
            offset=self.calibration_canvas.offset,
            grid_on=self.grid_on,
            content=self.content,
            settings=self.transform_settings,
        )
        self.calibration_canvas.display(surface)
        self.update_status()


def export_frame(path, store, width, height, units, size, calibrating, content):
    """Render a single frame from the stored calibration and write it"""
    surface = render_frame(size, store.load(), width, height, units,
                           is_calibrating=calibrating, content=content)
    cv3.imwrite(path, surface, mkdir=True)
    logging.info(f"Exported frame to {path}")


def parse_size(text):
    try:
        width, height = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {text!r}")
    return width, height


def main():
    parser = argparse.ArgumentParser(description='Calibrate - Projector Perspective Calibration Tool')
    parser.add_argument('content', nargs='?', help='Image file to project')
    parser.add_argument('--width', type=float, default=24, help='Nominal width of the surface (default: 24)')
    parser.add_argument('--height', type=float, default=18, help='Nominal height of the surface (default: 18)')
    parser.add_argument('--units', type=parse_unit, default='inches',
                        help='Measurement units: in or cm (default: in)')
    parser.add_argument('--state-file', default=DEFAULT_PATH,
                        help=f'Where calibration points are kept (default: {DEFAULT_PATH})')
    parser.add_argument('--device-pixel-ratio', type=float, default=1.0,
                        help='Device pixels per logical pixel (default: 1.0)')
    parser.add_argument('--project', action='store_true',
                        help='Start in projection mode instead of calibration mode')
    parser.add_argument('--export', metavar='PATH',
                        help='Render one frame from the stored calibration to PATH and exit')
    parser.add_argument('--size', type=parse_size, default=(1920, 1080),
                        help='Frame size for --export as WIDTHxHEIGHT (default: 1920x1080)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    content = None
    if args.content:
        try:
            content = load_content(args.content)
        except ValueError as e:
            logging.error(str(e))

    store = PointStore(args.state_file)

    if args.export:
        export_frame(args.export, store, args.width, args.height, args.units,
                     args.size, not args.project, content)
        return

    root = tk.Tk()
    CalibrateGUI(root, width=args.width, height=args.height, units=args.units, store=store,
                 device_pixel_ratio=args.device_pixel_ratio, calibrating=not args.project,
                 content=content)
    root.mainloop()


if __name__ == "__main__":
    main()

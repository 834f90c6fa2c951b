"""
CalibrationCanvas - Helper class binding a tkinter canvas to a PointEditor
and displaying rendered surfaces.
"""

import tkinter as tk
from PIL import Image, ImageTk

from .geometry import to_canvas_point

ARROW_KEYS = ("Left", "Right", "Up", "Down")


class CalibrationCanvas:
    """Helper class to route canvas input to the editor and show frames"""

    def __init__(self, canvas, editor, offset=(0, 0), device_pixel_ratio=1.0):
        self.canvas = canvas
        self.editor = editor
        self.offset = offset
        self.device_pixel_ratio = device_pixel_ratio

        # Input is ignored while projecting
        self.enabled = True

        # PhotoImage reference (must keep reference to prevent garbage collection)
        self.photo = None

        self.canvas.bind("<ButtonPress-1>", self.on_press)
        self.canvas.bind("<B1-Motion>", self.on_drag)
        self.canvas.bind("<Motion>", self.on_hover)
        self.canvas.bind("<ButtonRelease-1>", self.on_release)
        for key in ARROW_KEYS:
            self.canvas.bind(f"<{key}>", self.on_key)

    def get_size(self):
        """Current canvas size in device pixels"""
        width = max(1, int(self.canvas.winfo_width() * self.device_pixel_ratio))
        height = max(1, int(self.canvas.winfo_height() * self.device_pixel_ratio))
        return width, height

    def event_point(self, event):
        """Convert a tkinter event position to canvas device pixels"""
        return to_canvas_point(event.x, event.y, self.offset, self.device_pixel_ratio)

    def on_press(self, event):
        if not self.enabled:
            return
        self.canvas.focus_set()
        self.editor.pointer_down(self.event_point(event))

    def on_drag(self, event):
        if not self.enabled:
            return
        self.editor.pointer_move(self.event_point(event), buttons_held=True)

    def on_hover(self, event):
        # Tk reports held buttons in the event state mask
        if not self.enabled or event.state & 0x0100:
            return
        self.editor.pointer_move(self.event_point(event), buttons_held=False)

    def on_release(self, event):
        if not self.enabled:
            return
        self.editor.pointer_up()

    def on_key(self, event):
        if not self.enabled:
            return
        self.editor.key_down(event.keysym)

    def display(self, surface):
        """
        Show an RGB surface on the canvas.

        Args:
            surface: numpy array in RGB format, in device pixels
        """
        img_pil = Image.fromarray(surface)
        if self.device_pixel_ratio != 1.0:
            width = max(1, int(round(img_pil.width / self.device_pixel_ratio)))
            height = max(1, int(round(img_pil.height / self.device_pixel_ratio)))
            img_pil = img_pil.resize((width, height))
        self.photo = ImageTk.PhotoImage(image=img_pil)

        self.canvas.delete("all")
        self.canvas.create_image(0, 0, anchor=tk.NW, image=self.photo)

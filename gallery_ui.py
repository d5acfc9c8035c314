#!/usr/bin/env python3
"""
Hoversort — Native Gallery Window
A grid of images. Hover one to pixel-sort it column by column; move the
pointer away and it sorts itself back.

Usage:
    python3 gallery_ui.py

Requires: tkinter (built into Python), Pillow
"""

import sys
import os
import logging
from tkinter import Tk, Frame, Canvas, Label, NW, BOTH

from PIL import Image, ImageTk

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.config import GalleryConfig
from core.gallery import build_gallery
from core.scheduler import TkScheduler
from core.surface import RenderSurface

logger = logging.getLogger("gallery_ui")

PLACEHOLDER_SIZE = (320, 240)
CELL_PAD = 6


class TkSurface(RenderSurface):
    """Draws a display buffer onto a Tk Canvas through a PhotoImage."""

    def __init__(self, canvas, origin=(0, 0)):
        super().__init__(origin)
        self.canvas = canvas
        self.photo = None
        self._item = None

    def _draw(self, buffer, origin, span):
        image = Image.fromarray(buffer.array)
        if self.photo is None or (self.photo.width(), self.photo.height()) != buffer.size:
            self.canvas.config(width=buffer.width, height=buffer.height)
            self.photo = ImageTk.PhotoImage(image)
            if self._item is None:
                self._item = self.canvas.create_image(*origin, image=self.photo, anchor=NW)
            else:
                self.canvas.itemconfig(self._item, image=self.photo)
        else:
            self.photo.paste(image)


class GalleryApp:
    """Native desktop hover-sort gallery."""

    def __init__(self, root, config: GalleryConfig):
        self.root = root
        self.config = config
        self.root.title("Hoversort")
        self.root.configure(bg=config.background)

        self.scheduler = TkScheduler(root, fps=config.fps)
        self.canvases = {}

        self.grid = Frame(self.root, bg=config.background, padx=CELL_PAD, pady=CELL_PAD)
        self.grid.pack(fill=BOTH, expand=True)

        self.entries = build_gallery(config, surface_factory=self._make_surface,
                                     scheduler=self.scheduler)
        for entry in self.entries:
            self._bind(entry)

    def _make_surface(self, entry):
        canvas = Canvas(self.grid, width=PLACEHOLDER_SIZE[0], height=PLACEHOLDER_SIZE[1],
                        bg=self.config.background, highlightthickness=0)
        canvas.grid(row=entry.row, column=entry.column, padx=CELL_PAD, pady=CELL_PAD)
        self.canvases[entry.index] = canvas
        return TkSurface(canvas)

    def _bind(self, entry):
        canvas = self.canvases[entry.index]
        if not entry.loaded:
            # Leave the region blank, with the reason underneath
            Label(self.grid, text=entry.error.reason[:60], font=("Menlo", 9),
                  fg="gray", bg=self.config.background).grid(
                row=entry.row, column=entry.column, sticky="s")
            return
        canvas.bind("<Enter>", lambda _event, e=entry: e.hover_start())
        canvas.bind("<Leave>", lambda _event, e=entry: e.hover_end())


def main(config: GalleryConfig | None = None):
    config = config or GalleryConfig()
    root = Tk()
    app = GalleryApp(root, config)
    if not any(e.loaded for e in app.entries):
        logger.warning("No images could be loaded")
    root.mainloop()


if __name__ == "__main__":
    main()

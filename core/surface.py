"""
Hoversort — Render Surfaces
Where an engine's display buffer gets drawn.

An engine marks the columns it touched as dirty, then flushes. A surface
only redraws what was marked since the last flush; `present` redraws all.
"""

import numpy as np


class RenderSurface:
    """Base class. Subclasses implement _draw(buffer, origin, span)."""

    def __init__(self, origin=(0, 0)):
        self.origin = tuple(origin)
        self._dirty = None  # (start, end) column span or None

    @property
    def dirty(self):
        return self._dirty

    def mark_dirty(self, start: int, end: int):
        """Record columns [start, end) as changed. Spans merge."""
        if end <= start:
            return
        if self._dirty is None:
            self._dirty = (start, end)
        else:
            self._dirty = (min(self._dirty[0], start), max(self._dirty[1], end))

    def flush(self, buffer) -> bool:
        """Draw the dirty span of buffer. Returns False when nothing was dirty."""
        if self._dirty is None:
            return False
        span = self._dirty
        self._dirty = None
        self._draw(buffer, self.origin, span)
        return True

    def present(self, buffer, origin=None):
        """Draw the whole buffer."""
        if origin is not None:
            self.origin = tuple(origin)
        self._dirty = None
        self._draw(buffer, self.origin, (0, buffer.width))

    def _draw(self, buffer, origin, span):
        raise NotImplementedError


class ArraySurface(RenderSurface):
    """Headless surface that keeps a numpy copy of what was drawn.

    Args:
        origin: Draw origin (x, y). Stored, not used for addressing.
        record: If True, every draw appends a full frame copy to `frames`.
    """

    def __init__(self, origin=(0, 0), record: bool = False):
        super().__init__(origin)
        self.record = record
        self.frame = None
        self.frames = []
        self.draw_count = 0
        self.last_span = None

    def _draw(self, buffer, origin, span):
        start, end = span
        if self.frame is None or self.frame.shape != buffer.array.shape:
            self.frame = np.array(buffer.array, copy=True)
        else:
            self.frame[:, start:end] = buffer.array[:, start:end]
        self.draw_count += 1
        self.last_span = span
        if self.record:
            self.frames.append(self.frame.copy())

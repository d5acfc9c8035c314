"""
Hoversort — Column Sort Engine

One engine per image. On hover it sweeps left to right, replacing each
column of the display buffer with that column's pixels sorted by
brightness. On unhover it walks back toward x=0, restoring columns from
the untouched original. Each tick processes at most `step_size` columns.

Usage:
    engine = ColumnSortEngine(step_size=4, surface=ArraySurface())
    engine.initialize(load_image("images/erosion-1.jpg"))
    engine.on_hover_start()
    while engine.is_active:
        engine.tick()

The engine never drives itself. A scheduler subscribes to status changes
and calls tick() once per frame while the engine reports ACTIVE.
"""

import logging
import math
from enum import Enum

from core.pixel import PixelBuffer, DimensionMismatch
from effects.pixelsort import DEFAULT_SORT_KEY, get_sort_key, sort_columns

logger = logging.getLogger(__name__)

# Columns processed per tick. Higher = faster animation.
DEFAULT_STEP_SIZE = 4


class Status(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class EngineStateError(RuntimeError):
    """Engine used before it was initialized with an image."""
    pass


class ColumnSortEngine:
    """Incremental column sort/restore state machine for one image.

    Args:
        step_size: Columns processed per tick (>= 1).
        sort_by: Sort key name (see effects.SORT_KEYS).
        surface: Optional RenderSurface the display buffer is drawn to.
        origin: Draw origin passed to the surface.
    """

    def __init__(self, step_size: int = DEFAULT_STEP_SIZE, sort_by: str = DEFAULT_SORT_KEY,
                 surface=None, origin=(0, 0)):
        if isinstance(step_size, bool) or not isinstance(step_size, int) or step_size < 1:
            raise ValueError(f"step_size must be a positive integer, got {step_size!r}")
        get_sort_key(sort_by)

        self.step_size = step_size
        self.sort_by = sort_by
        self.surface = surface
        self.origin = tuple(origin)

        # State
        self._original = None
        self._display = None
        self._cursor = 0
        self._hovering = False
        self._status = Status.IDLE
        self._listeners = []

    # --- Lifecycle ---

    def initialize(self, original: PixelBuffer):
        """Bind a fully loaded image. Renders it once, then idles."""
        if original is None:
            raise EngineStateError("Cannot initialize without a loaded image")
        self._original = original.copy().freeze()
        self._display = self._original.copy()
        self._cursor = 0
        self._hovering = False
        logger.debug("Engine initialized: %dx%d, step=%d, key=%s",
                     self.width, self.height, self.step_size, self.sort_by)
        if self.surface is not None:
            self.surface.present(self._display, self.origin)
        self._set_status(Status.IDLE)

    def on_hover_start(self):
        """Pointer entered. Restart the sort sweep from a clean copy."""
        self._require_initialized()
        self._hovering = True
        self._cursor = 0
        self._display.copy_from(self._original)
        if self.surface is not None:
            self.surface.present(self._display, self.origin)
        self._set_status(Status.ACTIVE)

    def on_hover_end(self):
        """Pointer left. Resume ticking so sorted columns get restored."""
        self._require_initialized()
        self._hovering = False
        self._set_status(Status.ACTIVE if self._cursor > 0 else Status.IDLE)

    def tick(self) -> bool:
        """Advance the animation by one frame.

        Returns:
            True if the display buffer changed.
        """
        self._require_initialized()
        width = self.width

        if self._hovering and self._cursor < width:
            start = self._cursor
            end = min(start + self.step_size, width)
            for x, column in sort_columns(self._original.array, start, end, self.sort_by):
                self._display.write_column(x, column)
            self._cursor = end
            self._commit(start, end)
            if self._cursor == width:
                self._set_status(Status.IDLE)
            return True

        if not self._hovering and self._cursor > 0:
            end = self._cursor
            start = max(0, end - self.step_size)
            self._display.copy_columns_from(self._original, start, end)
            self._cursor = start
            self._commit(start, end)
            if self._cursor == 0:
                self._set_status(Status.IDLE)
            return True

        # Already at the boundary matching the hover state
        self._set_status(Status.IDLE)
        return False

    # --- Status ---

    def subscribe(self, callback):
        """Register callback(engine, status), called on every status change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    @property
    def status(self) -> Status:
        return self._status

    @property
    def is_idle(self) -> bool:
        return self._status is Status.IDLE

    @property
    def is_active(self) -> bool:
        return self._status is Status.ACTIVE

    # --- Read-only state ---

    @property
    def initialized(self) -> bool:
        return self._original is not None

    @property
    def original(self) -> PixelBuffer:
        return self._original

    @property
    def display(self) -> PixelBuffer:
        """Current display buffer. Callers must treat it as read-only."""
        return self._display

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def hovering(self) -> bool:
        return self._hovering

    @property
    def width(self) -> int:
        return self._original.width if self._original is not None else 0

    @property
    def height(self) -> int:
        return self._original.height if self._original is not None else 0

    @property
    def ticks_to_settle(self) -> int:
        """Ticks left before the cursor reaches the current target boundary."""
        if not self.initialized:
            return 0
        remaining = self.width - self._cursor if self._hovering else self._cursor
        return math.ceil(remaining / self.step_size)

    # --- Internals ---

    def _require_initialized(self):
        if self._original is None:
            raise EngineStateError("Engine has no image; call initialize() first")
        if self._display.size != self._original.size:
            raise DimensionMismatch(
                f"Display {self._display.size} diverged from original {self._original.size}"
            )

    def _commit(self, start, end):
        if self.surface is not None:
            self.surface.mark_dirty(start, end)
            self.surface.flush(self._display)

    def _set_status(self, status: Status):
        if status is self._status:
            return
        self._status = status
        for callback in list(self._listeners):
            callback(self, status)

    def __repr__(self):
        return (f"<ColumnSortEngine {self.width}x{self.height} cursor={self._cursor} "
                f"hovering={self._hovering} {self._status.value}>")

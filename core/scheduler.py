"""
Hoversort — Frame Schedulers
Call tick() on engines once per frame, only while they report ACTIVE.

Engines announce ACTIVE/IDLE transitions through subscribe(); the
scheduler keeps the set of engines that still have work and stops
running frames when that set is empty.
"""

import logging

from core.engine import Status

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60


class FrameScheduler:
    """Tracks attached engines and ticks the active ones."""

    def __init__(self):
        self.engines = []
        self.active = []
        self.frame_count = 0

    def attach(self, engine):
        if engine in self.engines:
            return
        self.engines.append(engine)
        engine.subscribe(self._on_status)
        if engine.is_active:
            self._activate(engine)

    def detach(self, engine):
        if engine not in self.engines:
            return
        engine.unsubscribe(self._on_status)
        self.engines.remove(engine)
        if engine in self.active:
            self.active.remove(engine)

    @property
    def is_running(self) -> bool:
        return bool(self.active)

    def run_frame(self) -> int:
        """Tick every active engine once. Returns how many were ticked."""
        ticked = 0
        # Engines may go idle mid-frame, so iterate over a snapshot.
        for engine in list(self.active):
            try:
                engine.tick()
            except Exception:
                logger.exception("Tick failed for %r, detaching it", engine)
                self.detach(engine)
                if not self.active:
                    self._stop()
                continue
            ticked += 1
        if ticked:
            self.frame_count += 1
        return ticked

    def _on_status(self, engine, status):
        if status is Status.ACTIVE:
            self._activate(engine)
        elif engine in self.active:
            self.active.remove(engine)
            if not self.active:
                self._stop()

    def _activate(self, engine):
        if engine not in self.active:
            self.active.append(engine)
        self._start()

    def _start(self):
        """Hook: first engine went active."""

    def _stop(self):
        """Hook: last engine went idle."""


class ManualScheduler(FrameScheduler):
    """Headless scheduler. Frames run only when asked."""

    def run_until_idle(self, max_frames: int | None = None) -> int:
        """Run frames until every engine is idle.

        Args:
            max_frames: Safety cap. None = no cap.

        Returns:
            Number of frames run.
        """
        frames = 0
        while self.active:
            if max_frames is not None and frames >= max_frames:
                break
            self.run_frame()
            frames += 1
        return frames


class TkScheduler(FrameScheduler):
    """Runs frames on a Tk event loop via root.after().

    Args:
        root: Tk root (anything with after/after_cancel).
        fps: Target frame rate.
    """

    def __init__(self, root, fps: int = DEFAULT_FPS):
        super().__init__()
        self.root = root
        self.fps = max(1, int(fps))
        self._after_id = None

    @property
    def interval_ms(self) -> int:
        return max(1, round(1000 / self.fps))

    def _start(self):
        if self._after_id is None:
            self._after_id = self.root.after(self.interval_ms, self._frame)

    def _stop(self):
        if self._after_id is not None:
            self.root.after_cancel(self._after_id)
            self._after_id = None

    def _frame(self):
        self._after_id = None
        self.run_frame()
        if self.active and self._after_id is None:
            self._after_id = self.root.after(self.interval_ms, self._frame)

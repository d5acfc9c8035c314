"""
Hoversort — Gallery Wiring
Builds one engine per configured image and binds it to its own surface.

A failed load only affects its own entry: the entry keeps the error and
its region stays blank. Hover events on a failed entry do nothing.
"""

import logging
from dataclasses import dataclass

from core.engine import ColumnSortEngine
from core.image_source import load_image, LoadFailure

logger = logging.getLogger(__name__)


@dataclass
class GalleryEntry:
    """One on-screen region and the engine behind it."""
    index: int
    path: str
    engine: ColumnSortEngine | None = None
    error: LoadFailure | None = None
    row: int = 0
    column: int = 0

    @property
    def loaded(self) -> bool:
        return self.engine is not None

    def hover_start(self):
        if self.engine is not None:
            self.engine.on_hover_start()

    def hover_end(self):
        if self.engine is not None:
            self.engine.on_hover_end()


def grid_position(index: int, columns: int) -> tuple[int, int]:
    """(row, column) of the index-th cell in a grid filled row by row."""
    return divmod(index, columns)


def build_engine(path, config, surface=None) -> ColumnSortEngine:
    """Load one image and return an initialized engine drawing to surface.

    Raises:
        LoadFailure: The image could not be loaded. No engine is created.
    """
    buffer = load_image(path, max_width=config.max_width)
    engine = ColumnSortEngine(step_size=config.step_size, sort_by=config.sort_by,
                              surface=surface)
    engine.initialize(buffer)
    return engine


def build_gallery(config, surface_factory=None, scheduler=None) -> list[GalleryEntry]:
    """Build every gallery entry.

    Args:
        config: GalleryConfig.
        surface_factory: Optional callable(entry) -> RenderSurface, called
                         before the image loads so the surface knows its cell.
        scheduler: Optional FrameScheduler to attach loaded engines to.

    Returns:
        One GalleryEntry per configured path, in order.
    """
    entries = []
    for index, path in enumerate(config.image_paths):
        row, column = grid_position(index, config.columns)
        entry = GalleryEntry(index=index, path=str(path), row=row, column=column)
        surface = surface_factory(entry) if surface_factory is not None else None
        try:
            entry.engine = build_engine(path, config, surface)
        except LoadFailure as e:
            logger.warning("Skipping image %d: %s", index, e)
            entry.error = e
        else:
            logger.debug("Loaded %s (%dx%d)", path, entry.engine.width, entry.engine.height)
            if scheduler is not None:
                scheduler.attach(entry.engine)
        entries.append(entry)

    loaded = sum(1 for e in entries if e.loaded)
    logger.info("Gallery ready: %d/%d images loaded", loaded, len(entries))
    return entries

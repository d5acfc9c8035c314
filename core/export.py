"""
Hoversort — Animation Export
Renders one full hover cycle (sort in, optional hold, restore out)
offline and writes it as an animated GIF or a PNG sequence.
"""

import logging
from pathlib import Path

from PIL import Image

from core.engine import ColumnSortEngine
from core.image_source import load_image
from core.scheduler import ManualScheduler
from core.surface import ArraySurface

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("gif", "png")
DEFAULT_HOLD_FRAMES = 30


def record_hover_cycle(engine: ColumnSortEngine, hold_frames: int = 0) -> list:
    """Drive an initialized engine through hover in and out, headlessly.

    The engine's surface is replaced by a recording ArraySurface for the
    duration of the cycle.

    Returns:
        List of (H, W, 4) uint8 frames: the initial image, one frame per
        tick while sorting, `hold_frames` copies of the sorted image, then
        one per tick while restoring.
    """
    surface = ArraySurface(origin=engine.origin, record=True)
    previous = engine.surface
    engine.surface = surface
    scheduler = ManualScheduler()
    scheduler.attach(engine)
    try:
        surface.present(engine.display)
        engine.on_hover_start()
        surface.frames = surface.frames[:1]
        scheduler.run_until_idle()
        if surface.frames:
            surface.frames.extend(surface.frames[-1].copy() for _ in range(hold_frames))
        engine.on_hover_end()
        scheduler.run_until_idle()
    finally:
        scheduler.detach(engine)
        engine.surface = previous
    return surface.frames


def export_animation(image_path, output, config, fmt: str = "gif",
                     hold_frames: int = DEFAULT_HOLD_FRAMES) -> Path:
    """Render a hover cycle for one image and write it to disk.

    Args:
        image_path: Source image.
        output: GIF file path (fmt="gif") or directory (fmt="png").
        config: GalleryConfig supplying step_size, sort_by, max_width, fps.
        fmt: 'gif' or 'png'.
        hold_frames: Frames to linger on the fully sorted image.

    Returns:
        Path written.

    Raises:
        LoadFailure: The image could not be loaded.
        ValueError: Unknown format or negative hold.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}")
    if hold_frames < 0:
        raise ValueError(f"hold_frames must be >= 0, got {hold_frames}")

    engine = ColumnSortEngine(step_size=config.step_size, sort_by=config.sort_by)
    engine.initialize(load_image(image_path, max_width=config.max_width))
    frames = record_hover_cycle(engine, hold_frames=hold_frames)
    images = [Image.fromarray(f) for f in frames]

    output = Path(output)
    if fmt == "gif":
        output.parent.mkdir(parents=True, exist_ok=True)
        duration = max(20, round(1000 / config.fps))
        images[0].save(
            output,
            save_all=True,
            append_images=images[1:],
            duration=duration,
            loop=0,
            disposal=2,
        )
    else:
        output.mkdir(parents=True, exist_ok=True)
        for i, img in enumerate(images):
            img.save(output / f"frame_{i:05d}.png")

    logger.info("Exported %d frames to %s", len(images), output)
    return output

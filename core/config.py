"""
Hoversort — Gallery Configuration
Image list, animation speed and layout. Loaded once at startup from
defaults, an optional JSON file, and CLI overrides (in that order).

Example config.json:
    {
        "image_paths": ["images/erosion-1.jpg", "images/erosion-2.jpg"],
        "step_size": 4,
        "sort_by": "luminance",
        "columns": 2
    }
"""

import json
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path

from core.engine import DEFAULT_STEP_SIZE
from core.safety import MAX_IMAGE_WIDTH, SafetyError, validate_step_size, validate_max_width
from core.scheduler import DEFAULT_FPS
from effects.pixelsort import DEFAULT_SORT_KEY, SORT_KEYS

DEFAULT_IMAGE_PATHS = [
    "images/erosion-1.jpg",
    "images/erosion-2.jpg",
    "images/erosion-3.jpg",
    "images/erosion-4.jpg",
]

MAX_COLUMNS = 8
MAX_FPS = 240


class ConfigError(Exception):
    """Invalid configuration file or value."""
    pass


@dataclass
class GalleryConfig:
    """Gallery settings.

    image_paths: Images to show, one engine each.
    step_size: Columns sorted/restored per frame. Higher = faster animation.
    max_width: Wider images are downscaled to this width.
    sort_by: Sort key name.
    fps: Target frame rate of the animation loop.
    columns: Grid columns in the gallery window.
    background: Window background color.
    """
    image_paths: list = field(default_factory=lambda: list(DEFAULT_IMAGE_PATHS))
    step_size: int = DEFAULT_STEP_SIZE
    max_width: int = MAX_IMAGE_WIDTH
    sort_by: str = DEFAULT_SORT_KEY
    fps: int = DEFAULT_FPS
    columns: int = 2
    background: str = "#050506"

    def validate(self):
        """Raise ConfigError on the first invalid value. Returns self."""
        try:
            validate_step_size(self.step_size)
            validate_max_width(self.max_width)
        except SafetyError as e:
            raise ConfigError(str(e)) from e
        if self.sort_by not in SORT_KEYS:
            raise ConfigError(
                f"Unknown sort_by '{self.sort_by}'. Available: {', '.join(sorted(SORT_KEYS))}"
            )
        if (isinstance(self.fps, bool) or not isinstance(self.fps, int)
                or not 1 <= self.fps <= MAX_FPS):
            raise ConfigError(f"fps must be 1-{MAX_FPS}, got {self.fps!r}")
        if (isinstance(self.columns, bool) or not isinstance(self.columns, int)
                or not 1 <= self.columns <= MAX_COLUMNS):
            raise ConfigError(f"columns must be 1-{MAX_COLUMNS}, got {self.columns!r}")
        if not isinstance(self.image_paths, list) or not all(
                isinstance(p, (str, Path)) for p in self.image_paths):
            raise ConfigError("image_paths must be a list of paths")
        return self

    def with_overrides(self, **overrides):
        """Copy with every non-None override applied."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GalleryConfig.from_dict(data)

    def to_dict(self):
        data = asdict(self)
        data["image_paths"] = [str(p) for p in self.image_paths]
        return data

    @classmethod
    def from_dict(cls, d):
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known}).validate()


def load_config(path) -> GalleryConfig:
    """Load a JSON config file on top of the defaults.

    Relative image paths resolve against the config file's directory.

    Raises:
        ConfigError: Unreadable file, bad JSON, or invalid values.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a JSON object")

    if isinstance(data.get("image_paths"), list):
        base = path.resolve().parent
        data["image_paths"] = [
            str(base / p) if isinstance(p, str) and not Path(p).is_absolute() else p
            for p in data["image_paths"]
        ]

    return GalleryConfig.from_dict(data)

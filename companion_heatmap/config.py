import json
import math
import os
import sys
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from .log import get_logger
from .treemap_layout import MIN_WEIGHT

log = get_logger(__name__, component="config")

CONFIG_ENV_VAR = "COMPANION_HEATMAP_CONFIG"


def default_config_path() -> Path:
    """config.json next to the executable when frozen, next to the package otherwise."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent / "config.json"
    return Path(__file__).parent / "config.json"


@dataclass
class HeatmapConfig:
    """Layout and coloring options for the heatmap."""

    size_strategy: str = "equal"
    min_weight: float = MIN_WEIGHT
    default_sector: str = "Technology"
    color_max_pct: float = 4.0

    def __post_init__(self):
        # the layout floor must stay positive or zero weights would vanish
        if not (math.isfinite(self.min_weight) and self.min_weight > 0):
            log.warning("invalid_config_value", key="min_weight", value=repr(self.min_weight))
            self.min_weight = MIN_WEIGHT

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "HeatmapConfig":
        known = {f.name: f for f in fields(cls)}
        values = {}
        for key, value in d.items():
            if key not in known:
                log.warning("unknown_config_key", key=key)
                continue
            default = known[key].default
            try:
                values[key] = type(default)(value)
            except (TypeError, ValueError):
                log.warning("invalid_config_value", key=key, value=repr(value))
        return cls(**values)


def load_config(path=None) -> HeatmapConfig:
    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        return HeatmapConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.warning("config_load_failed", path=str(path), error=str(e))
        return HeatmapConfig()
    if not isinstance(data, dict):
        log.warning("config_not_a_mapping", path=str(path))
        return HeatmapConfig()
    return HeatmapConfig.from_dict(data)


def save_config(config: HeatmapConfig, path=None) -> Path:
    path = Path(path) if path is not None else default_config_path()
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path

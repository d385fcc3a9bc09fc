import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from mandelbmp.errors import ConfigurationError
from mandelbmp.palette import ColorBandTable

DEFAULT_COLOR_RANGES = [
    [0.0, [0, 0, 0]],
    [0.3, [255, 0, 0]],
    [0.5, [255, 255, 0]],
    [1.0, [255, 255, 255]],
]

def default_config() -> Dict[str, Any]:
    return {
        "width": 800,
        "height": 600,
        "max_iterations": 1000,
        "color_ranges": [list(r) for r in DEFAULT_COLOR_RANGES],
        "output": "image.bmp",
        "progress_every": 80,
    }

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path:
        return default_config()
    with open(config_path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ConfigurationError("Config JSON must be an object.")
    out = default_config()
    out.update(cfg)
    return out

def _normalise_ranges(ranges: Any) -> List[List[Any]]:
    if not isinstance(ranges, (list, tuple)):
        raise ConfigurationError("color_ranges must be a list of [threshold, [r, g, b]] pairs.")
    out = []
    for entry in ranges:
        if isinstance(entry, dict):
            entry = (entry.get("threshold"), entry.get("color"))
        if not (isinstance(entry, (list, tuple)) and len(entry) == 2):
            raise ConfigurationError(f"Bad colour range entry: {entry!r}")
        threshold, color = entry
        if not (isinstance(color, (list, tuple)) and len(color) == 3):
            raise ConfigurationError(f"Colour must be [r, g, b]: {color!r}")
        try:
            threshold = float(threshold)
            channels = [int(c) for c in color]
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Bad colour range entry: {entry!r}") from e
        if any(c < 0 or c > 255 for c in channels):
            raise ConfigurationError(f"Colour channels must be within 0..255: {color!r}")
        out.append([threshold, channels])
    if len(out) < 2:
        raise ConfigurationError("At least two colour ranges are required.")
    return out

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    required = ["width", "height", "max_iterations", "color_ranges"]
    for r in required:
        if r not in cfg:
            raise ConfigurationError(f"Missing config field: {r}")

    try:
        width = int(cfg["width"])
        height = int(cfg["height"])
        max_iterations = int(cfg["max_iterations"])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"width/height/max_iterations must be integers: {e}") from e
    if width <= 0 or height <= 0 or max_iterations <= 0:
        raise ConfigurationError("width/height/max_iterations must be positive.")

    out = dict(cfg)
    out["width"] = width
    out["height"] = height
    out["max_iterations"] = max_iterations
    try:
        original_scale = cfg.get("original_scale")
        out["original_scale"] = float(height / 2.0 if original_scale is None else original_scale)
        scale = cfg.get("scale")
        out["scale"] = float(out["original_scale"] if scale is None else scale)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"original_scale/scale must be numbers: {e}") from e
    if out["original_scale"] <= 0 or out["scale"] <= 0:
        raise ConfigurationError("original_scale/scale must be > 0.")

    center = cfg.get("zoom_center")
    if center is None:
        center = [width // 2, height // 2]
    if not (isinstance(center, (list, tuple)) and len(center) == 2):
        raise ConfigurationError("zoom_center must be [x, y].")
    try:
        out["zoom_center"] = [float(center[0]), float(center[1])]
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"zoom_center must be two numbers: {center!r}") from e

    out["color_ranges"] = _normalise_ranges(cfg["color_ranges"])
    out["output"] = str(cfg.get("output", "image.bmp"))
    try:
        out["progress_every"] = max(1, int(cfg.get("progress_every", 80)))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"progress_every must be an integer: {e}") from e
    return out

@dataclass(frozen=True)
class RenderSettings:
    width: int
    height: int
    max_iterations: int
    original_scale: float
    scale: float
    zoom_center: Tuple[float, float]
    color_ranges: Tuple[Tuple[float, Tuple[int, int, int]], ...]
    progress_every: int = 80

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

def build_settings(cfg: Dict[str, Any]) -> RenderSettings:
    cfg = normalise_config(cfg)
    return RenderSettings(
        width=cfg["width"],
        height=cfg["height"],
        max_iterations=cfg["max_iterations"],
        original_scale=cfg["original_scale"],
        scale=cfg["scale"],
        zoom_center=(cfg["zoom_center"][0], cfg["zoom_center"][1]),
        color_ranges=tuple((t, tuple(c)) for t, c in cfg["color_ranges"]),
        progress_every=cfg["progress_every"],
    )

def build_color_table(settings: RenderSettings) -> ColorBandTable:
    table = ColorBandTable(settings.max_iterations)
    (start_threshold, start_color), *bands = settings.color_ranges
    table.set_start_color(start_color, start_threshold)
    for threshold, color in bands:
        table.add_band(threshold, color)
    return table

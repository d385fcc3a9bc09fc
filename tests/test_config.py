import json

import pytest

from mandelbmp.config import build_color_table, build_settings, load_config, normalise_config
from mandelbmp.errors import ConfigurationError


def test_defaults():
    cfg = normalise_config(load_config(None))
    assert (cfg["width"], cfg["height"], cfg["max_iterations"]) == (800, 600, 1000)
    assert cfg["original_scale"] == cfg["scale"] == 300.0
    assert cfg["zoom_center"] == [400.0, 300.0]
    assert cfg["output"] == "image.bmp"
    assert [r[0] for r in cfg["color_ranges"]] == [0.0, 0.3, 0.5, 1.0]


def test_default_color_table():
    table = build_color_table(build_settings(load_config(None)))
    assert table.band_count == 3
    assert table.thresholds == pytest.approx([1000.0, 1000.3, 1000.5, 1001.0])
    assert table.colors[1] == (255, 0, 0)


def test_json_overrides_defaults(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({
        "width": 64,
        "scale": 90,
        "zoom_center": [10, 20],
        "color_ranges": [{"threshold": 0, "color": [0, 0, 0]}, {"threshold": 1, "color": [0, 0, 255]}],
    }))
    settings = build_settings(load_config(str(path)))
    assert settings.width == 64
    assert settings.height == 600
    assert settings.original_scale == 300.0
    assert settings.scale == 90.0
    assert settings.zoom_center == (10.0, 20.0)
    assert settings.color_ranges == ((0.0, (0, 0, 0)), (1.0, (0, 0, 255)))


def test_non_object_json(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


@pytest.mark.parametrize("patch", [
    {"width": 0},
    {"max_iterations": "many"},
    {"color_ranges": [[0.0, [0, 0, 0]]]},
    {"color_ranges": [[0.0, [0, 0, 0]], [1.0, [0, 300, 0]]]},
    {"color_ranges": [[0.0, [0, 0]], [1.0, [0, 0, 0]]]},
    {"zoom_center": [1, 2, 3]},
    {"scale": -1},
    {"scale": 0},
    {"original_scale": 0},
    {"scale": "wide"},
    {"zoom_center": [None, 1]},
    {"zoom_center": ["left", "top"]},
    {"progress_every": "often"},
])
def test_invalid_values(patch):
    cfg = load_config(None)
    cfg.update(patch)
    with pytest.raises(ConfigurationError):
        normalise_config(cfg)


def test_missing_field():
    cfg = load_config(None)
    del cfg["color_ranges"]
    with pytest.raises(ConfigurationError):
        normalise_config(cfg)


def test_null_scales_fall_back_to_defaults():
    cfg = load_config(None)
    cfg.update({"original_scale": None, "scale": None, "zoom_center": None})
    out = normalise_config(cfg)
    assert out["original_scale"] == out["scale"] == 300.0
    assert out["zoom_center"] == [400.0, 300.0]

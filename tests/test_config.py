"""Tests for packing configuration."""

import json

import pytest

from fractabubble.config import PackingConfig, load_config, make_config


class TestPackingConfig:
    def test_defaults(self):
        config = PackingConfig()
        assert config.min_radius == 5
        assert config.max_radius is None
        assert config.image_height == 256
        assert config.fill == "#800080"
        assert config.oracle == "scan"

    def test_default_canvas_size(self):
        assert PackingConfig().canvas_size == (225, 256)

    @pytest.mark.parametrize(
        "values",
        [
            {"min_radius": 0},
            {"max_radius": 0},
            {"image_height": 8},
            {"threshold": 255},
            {"fill": "#12345"},
            {"fill": "#GGGGGG"},
            {"oracle": "voronoi"},
        ],
    )
    def test_rejects_invalid_values(self, values):
        with pytest.raises(ValueError):
            make_config(**values)


class TestLoadConfig:
    def test_load_with_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"min_radius": 3, "max_radius": 40, "oracle": "growth"}))
        config = load_config(path, max_radius=12, fill=None)
        assert config.min_radius == 3
        assert config.max_radius == 12
        assert config.oracle == "growth"
        assert config.fill == "#800080"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid config file"):
            load_config(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="JSON object"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"min_radius": -1}))
        with pytest.raises(ValueError, match="min_radius"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

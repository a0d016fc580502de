"""
Tests for the JSON config file (config.py).
"""

import json

import pytest
from structlog.testing import capture_logs

from companion_heatmap import config as config_module
from companion_heatmap.config import HeatmapConfig, default_config_path, load_config, save_config


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "config.json") == HeatmapConfig()

    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        cfg = HeatmapConfig(size_strategy="volume", min_weight=0.01, default_sector="Other", color_max_pct=5.0)
        assert save_config(cfg, path) == path
        assert load_config(path) == cfg

    def test_malformed_json_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_config(path) == HeatmapConfig()

    def test_non_mapping_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        assert load_config(path) == HeatmapConfig()

    def test_unknown_and_invalid_keys_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"size_strategy": "position", "min_weight": "abc", "mini_position": {"x": 1}}))
        cfg = load_config(path)
        assert cfg.size_strategy == "position"
        assert cfg.min_weight == HeatmapConfig().min_weight

    def test_numbers_coerced(self):
        assert HeatmapConfig.from_dict({"color_max_pct": "2.5"}).color_max_pct == 2.5

    @pytest.mark.parametrize("value", [0, -1, "-0.5", "nan", "inf"])
    def test_invalid_min_weight_keeps_default(self, value):
        assert HeatmapConfig.from_dict({"min_weight": value}).min_weight == HeatmapConfig().min_weight

    def test_non_positive_min_weight_is_logged(self):
        with capture_logs() as logs:
            cfg = HeatmapConfig(min_weight=0.0)
        assert cfg.min_weight == HeatmapConfig().min_weight
        assert logs[0]["event"] == "invalid_config_value"
        assert logs[0]["key"] == "min_weight"


class TestConfigPath:

    def test_env_override(self, tmp_path, monkeypatch):
        target = tmp_path / "custom.json"
        monkeypatch.setenv(config_module.CONFIG_ENV_VAR, str(target))
        assert default_config_path() == target

    def test_defaults_next_to_package(self, monkeypatch):
        monkeypatch.delenv(config_module.CONFIG_ENV_VAR, raising=False)
        path = default_config_path()
        assert path.name == "config.json"
        assert path.parent.name == "companion_heatmap"

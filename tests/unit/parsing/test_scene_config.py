"""Unit tests for the scene configuration loader."""

import json
import logging

import pytest

from harnesstrace.core.exceptions import LoadError
from harnesstrace.parsing.scene_config import load_scene_config, parse_scene_config


class TestSceneConfig:
    def test_valid_bundle(self):
        config = parse_scene_config({
            "harnesses": {
                "main": {"path": [[0, 0, 0], [1, 0, 0], [1, 1, 0]], "thickness": 0.02, "bundleCount": 12},
            },
            "materials": {"wire": {"color": "#222"}},
        })
        bundle = config.harnesses["main"]
        assert len(bundle.path) == 3
        assert bundle.bundle_count == 12
        assert config.materials["wire"]["color"] == "#222"

    def test_short_path_is_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = parse_scene_config({
                "harnesses": {"stub": {"path": [[0, 0, 0]], "thickness": 0.01}},
            })
        assert config.harnesses == {}
        assert "stub" in caplog.text

    def test_invalid_bundle_is_dropped(self):
        config = parse_scene_config({
            "harnesses": {
                "bad": {"path": [[0, 0, 0], [1, 1, 1]], "thickness": -1},
                "good": {"path": [[0, 0, 0], [1, 1, 1]], "thickness": 0.01},
            },
        })
        assert list(config.harnesses) == ["good"]
        assert config.harnesses["good"].bundle_count == 1

    def test_non_mapping_sections(self):
        config = parse_scene_config({"harnesses": [1, 2], "materials": "red"})
        assert config.harnesses == {}
        assert config.materials == {}

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps({"harnesses": {"h": {"path": [[0, 0, 0], [0, 0, 1]], "thickness": 0.01}}}))
        assert "h" in load_scene_config(path).harnesses

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("[]")
        with pytest.raises(LoadError):
            load_scene_config(path)

    def test_load_rejects_bad_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("{")
        with pytest.raises(LoadError):
            load_scene_config(path)

import json

import pytest

from noisegen.config_loader import DEFAULT_CONFIG, load_config, merge_configs, apply_overrides


def test_defaults_without_file():
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"noise_type": "impulse", "probability": 0.2, "seed": 3}))
    config = load_config(str(path))
    assert config["noise_type"] == "impulse"
    assert config["probability"] == 0.2
    assert config["seed"] == 3
    assert config["stddev"] == DEFAULT_CONFIG["stddev"]


def test_loading_does_not_mutate_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"noise_type": "uniform"}))
    load_config(str(path))
    assert DEFAULT_CONFIG["noise_type"] == "gaussian"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_non_object_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_merge_is_recursive():
    merged = merge_configs({"a": {"b": 1, "c": 2}, "d": 3}, {"a": {"c": 5}})
    assert merged == {"a": {"b": 1, "c": 5}, "d": 3}


def test_apply_overrides_skips_none():
    config = apply_overrides(DEFAULT_CONFIG, {"stddev": 4.0, "mean": None, "noise_type": "uniform"})
    assert config["stddev"] == 4.0
    assert config["mean"] is None
    assert config["noise_type"] == "uniform"
    assert DEFAULT_CONFIG["stddev"] == 32.0


def test_directory_as_config_file(tmp_path):
    with pytest.raises(ValueError):
        load_config(str(tmp_path))

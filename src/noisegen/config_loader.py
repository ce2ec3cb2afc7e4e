import copy
import json
import os
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Defaults match the command-line defaults. A mean of None lets each model
# use its own default (0 for additive noise, 1 for multiplicative noise).
DEFAULT_CONFIG = {
    "noise_type": "gaussian",
    "mean": None,
    "stddev": 32.0,
    "amplitude": 32.0,
    "probability": 0.01,
    "output_min": 0,
    "output_max": 255,
    "seed": None,
    "workers": None,
    "log_level": "INFO",
}


def merge_configs(default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merges user config into default config."""
    merged = copy.deepcopy(default)
    for key, value in user.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads configuration from a JSON file, merges with defaults.

    Args:
        config_path (Optional[str]): Path to the user's JSON config file.
                                      If None, returns the default config.

    Returns:
        Dict[str, Any]: The final configuration dictionary.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        json.JSONDecodeError: If the config file is not valid JSON.
        ValueError: If the file cannot be opened (directory, permissions)
                    or does not hold a JSON object.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        try:
            with open(config_path, 'r') as f:
                user_config = json.load(f)
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(f"Error decoding JSON from {config_path}: {e.msg}", e.doc, e.pos)
        except OSError as e:
            raise ValueError(f"Error loading configuration from {config_path}: {e}") from e
        if not isinstance(user_config, dict):
            raise ValueError(f"Configuration in {config_path} must be a JSON object, "
                             f"got {type(user_config).__name__}")
        unknown = sorted(set(user_config) - set(DEFAULT_CONFIG))
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys in {config_path}: {', '.join(unknown)}")
        final_config = merge_configs(final_config, user_config)
        logger.debug(f"Loaded configuration from {config_path}")

    return final_config


def apply_overrides(config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of `config` with every non-None value of `overrides` applied."""
    return merge_configs(config, {key: value for key, value in overrides.items() if value is not None})

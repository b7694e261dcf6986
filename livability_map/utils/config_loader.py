"""
Configuration Loader Utility

Loads configuration from YAML files, a .env file and LM_-prefixed
environment variables, layered over built-in defaults.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_PREFIX = "LM_"


def _load_config_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Environment variables should be prefixed with 'LM_' (Livability Map).
    Nested values use double underscore: LM_REMOTE__API_KEY

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary from environment variables, empty if none found
    """
    config: Dict[str, Any] = {}

    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            keys = key[len(ENV_PREFIX):].lower().split("__")

            current = config
            for k in keys[:-1]:
                if not isinstance(current.get(k), dict):
                    current[k] = {}
                current = current[k]
            current[keys[-1]] = value

    return config


def get_default_config() -> Dict[str, Any]:
    """
    Get the built-in default configuration.

    Returns
    -------
    Dict[str, Any]
        Default configuration dictionary
    """
    return {
        "data": {
            "dataset": "data/nsw_suburb_scores.json",
            "score_scale": 10,
            # "floor" keeps unscored suburbs at floor_value, "exclude" drops them
            "unscored_policy": "floor",
            "floor_value": 1.0,
            # Known bad geocodes
            "exclude_ids": ["CADGEE", "ARATULA", "WASHPOOL"]
        },
        "interpolation": {
            "k": 8,
            "power": 2.0,
            "influence_count": 3
        },
        "heatmap": {
            "base_radius": 25.0,
            "reference_zoom": 6.0
        },
        "visualization": {
            "color_policy": "linear",
            "center": [-32.5, 147.0],
            "zoom": 6,
            "width": 1024,
            "height": 768,
            "marker_radius": 6,
            "output": "output/livability_map.html",
            "auto_open_html": False
        },
        "interaction": {
            "frame_interval": 1.0 / 60.0
        },
        "remote": {
            "base_url": "",
            "api_key": "",
            "timeout": 10.0
        },
        "logging": {
            "level": "INFO",
            "file": None,
            "console": True
        }
    }


def _merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Parameters
    ----------
    base : Dict[str, Any]
        Base configuration
    override : Dict[str, Any]
        Override configuration (takes precedence)

    Returns
    -------
    Dict[str, Any]
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration with layered overrides:
    1. Built-in defaults
    2. configs/config.yaml (or the given path), if it exists
    3. .env file at the project root (loaded into the environment)
    4. LM_-prefixed environment variables

    Parameters
    ----------
    config_path : str, optional
        Path to config file. Defaults to configs/config.yaml relative to project root.
        Relative paths are resolved relative to the project root.

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary

    Raises
    ------
    FileNotFoundError
        If an explicit config_path is given and does not exist
    ValueError
        If the YAML file does not contain a mapping at the root
    """
    env_file = PROJECT_ROOT / ".env"
    if env_file.exists():
        load_dotenv(env_file)

    explicit = config_path is not None
    if config_path is None:
        path = PROJECT_ROOT / "configs" / "config.yaml"
    else:
        path = Path(config_path)
        if not path.is_absolute():
            path = PROJECT_ROOT / path

    config = get_default_config()

    if path.exists():
        with open(path, 'r', encoding='utf-8') as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Config file must contain a mapping at the root: {path}")
        config = _merge_configs(config, file_config)
    elif explicit:
        raise FileNotFoundError(f"Config file not found: {path}")

    env_config = _load_config_from_env()
    if env_config:
        config = _merge_configs(config, env_config)

    return config


def resolve_path(path: str, project_root: Path = PROJECT_ROOT) -> Path:
    """Resolve a configured path relative to the project root."""
    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = project_root / resolved
    return resolved


def as_bool(value: Any) -> bool:
    """Interpret a config flag; environment overrides arrive as strings like "true" or "0"."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)

"""
Defaults loader for configuration from YAML files.

Provides a hierarchical configuration system:
1. config/defaults.yaml - Base defaults (checked into repo)
2. config/settings.yaml - Local overrides (gitignored)
3. Environment variables - Final override, handled by core.config
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Cache for loaded config
_config_cache: Optional[Dict[str, Any]] = None
_config_path: Optional[Path] = None


def get_project_root() -> Path:
    """Get the project root directory."""
    # Navigate up from lifeweeks/core/defaults_loader.py
    return Path(__file__).parent.parent.parent


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents as a dictionary."""
    if not file_path.exists():
        return {}

    with open(file_path, "r", encoding="utf-8") as f:
        content = yaml.safe_load(f)
        return content if content else {}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def get_nested(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a nested value from config using dot notation.

    Example:
        get_nested(config, "life_expectancy.default_country", "India")
    """
    value: Any = config

    for key in key_path.split("."):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def load_defaults(
    defaults_path: Optional[Path] = None,
    settings_path: Optional[Path] = None,
    reload: bool = False,
) -> Dict[str, Any]:
    """
    Load configuration from YAML files.

    Args:
        defaults_path: Path to defaults.yaml (optional, uses project default)
        settings_path: Path to settings.yaml (optional, uses project default)
        reload: Force reload even if cached

    Returns:
        Merged configuration dictionary
    """
    global _config_cache, _config_path

    project_root = get_project_root()

    if defaults_path is None:
        env_path = os.getenv("LIFEWEEKS_DEFAULTS_PATH")
        defaults_path = (
            Path(env_path) if env_path else project_root / "config" / "defaults.yaml"
        )

    if settings_path is None:
        settings_path = defaults_path.parent / "settings.yaml"

    if not reload and _config_cache is not None and _config_path == defaults_path:
        return _config_cache

    config = load_yaml_file(defaults_path)

    user_settings = load_yaml_file(settings_path)
    if user_settings:
        config = deep_merge(config, user_settings)

    _config_cache = config
    _config_path = defaults_path

    return config


def get_config_value(key_path: str, default: Any = None) -> Any:
    """
    Get a configuration value using dot notation.

    Args:
        key_path: Dot-separated path like "life_expectancy.fallback_years"
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    return get_nested(load_defaults(), key_path, default)


def clear_cache() -> None:
    """Clear the configuration cache (useful for testing)."""
    global _config_cache, _config_path
    _config_cache = None
    _config_path = None

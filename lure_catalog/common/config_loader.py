"""
Configuration Loader

Loads YAML configuration files for the image pipeline, scraping policy,
catalog table and tracker field layout.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import ConfigError


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise ConfigError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'pipeline.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        ConfigError: If the file is missing or is not valid YAML
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e


def load_pipeline_config() -> Dict[str, Any]:
    """
    Load pipeline tunables.

    Returns:
        Dictionary with 'http', 'scrape', 'image' and 'catalog' sections

    Example:
        {
            'image': {'width': 500, 'quality': 80, 'referers': {...}},
            'scrape': {'product_delay': 0.5, 'retry': {...}},
            ...
        }
    """
    return load_config('pipeline.yaml')


def load_tracker_config() -> Dict[str, Any]:
    """
    Load tracker field names and status labels.

    Returns:
        Dictionary with 'maker' and 'url_record' sections, each holding
        'fields' (logical name -> tracker column) and 'statuses'
    """
    return load_config('tracker.yaml')


def get_section(config: Dict[str, Any], *path: str) -> Dict[str, Any]:
    """
    Walk nested config sections, returning {} for any missing level.

    Example:
        >>> get_section({'image': {'referers': {'a': 'b'}}}, 'image', 'referers')
        {'a': 'b'}
    """
    node: Any = config
    for key in path:
        if not isinstance(node, dict):
            return {}
        node = node.get(key) or {}
    return node if isinstance(node, dict) else {}

"""
Configuration management for code generation targets.

Handles loading target settings from JSON files and merging them with
explicit overrides.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields

from .errors import ConfigurationError


@dataclass
class TargetConfig:
    """Settings needed to build a target."""

    # Directory containing templates/
    base_dir: Optional[str] = None

    # Formatter language, resolved through the formatter registry
    language: str = "default"

    # Passed to templates as `options`
    options: Dict[str, Any] = field(default_factory=dict)

    # Tidy whitespace of generated files
    tidy: bool = False

    autoescape: bool = False


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    if not path.suffix.lower() == '.json':
        raise ConfigurationError(f"Configuration file must be JSON: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to load configuration file {path}: {str(e)}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration file must contain a JSON object: {path}")

    return config


def _dict_to_config(config_dict: Dict[str, Any]) -> TargetConfig:
    """Convert dictionary to TargetConfig, folding unknown keys into options."""
    known_fields = {f.name for f in fields(TargetConfig)}

    config_args = {}
    extra_options = {}

    for key, value in config_dict.items():
        if key in known_fields:
            config_args[key] = value
        else:
            extra_options[key] = value

    if extra_options:
        options = dict(config_args.get('options') or {})
        options.update(extra_options)
        config_args['options'] = options

    return TargetConfig(**config_args)


def load_target_config(config_file: Optional[Union[str, Path]] = None,
                       **overrides: Any) -> TargetConfig:
    """
    Load target configuration.

    Args:
        config_file: Path to JSON configuration file
        **overrides: Values taking precedence over the file; None is ignored

    Returns:
        Merged configuration
    """
    config: Dict[str, Any] = {}

    if config_file:
        config.update(load_config_file(config_file))

    for key, value in overrides.items():
        if value is None:
            continue
        if key == 'options':
            config['options'] = {**(config.get('options') or {}), **value}
        else:
            config[key] = value

    return _dict_to_config(config)

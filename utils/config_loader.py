"""Configuration management utilities."""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "screening.yaml"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Sections read by the screening service, API server and CLI
KNOWN_SECTIONS = ('model', 'evidence', 'risk_bands', 'logging', 'api')


def load_config(config_path=DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load a screening configuration file.

    Unknown top-level sections are kept but logged, since a misspelled
    section (e.g. `risk_band`) would otherwise silently fall back to the
    shipped defaults.

    Args:
        config_path: Path to YAML configuration file (str or Path)

    Returns:
        Configuration mapping (empty for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
        ValueError: If the top level is not a mapping
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    unknown = sorted(set(config) - set(KNOWN_SECTIONS))
    if unknown:
        logger.warning(f"Unknown config sections in {config_path} are not used: {unknown}")

    logger.info(f"Loaded configuration from {config_path} (sections: {sorted(config)})")

    return config


def get_nested_config(config: Mapping[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Look up a dotted key such as `risk_bands.high` or `api.port`.

    Any mapping is traversed, so read-only views of a loaded config work
    the same as the plain dict from `load_config`.
    """
    value: Any = config
    for key in key_path.split('.'):
        if not isinstance(value, Mapping) or key not in value:
            return default
        value = value[key]
    return value


def configure_logging(config: Optional[Dict[str, Any]] = None, log_file: Optional[str] = None) -> None:
    """
    Configure root logging from the `logging.level` setting.

    Args:
        config: Configuration dictionary
        log_file: Optional file to log to in addition to stdout
    """
    level_name = str(get_nested_config(config or {}, 'logging.level', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

"""
Configuration for the Hireflow Engine.

Settings are read from an optional YAML file and overridden by environment
variables. The resolved settings are cached for the lifetime of the process;
call ``get_settings.cache_clear()`` to force a reload.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HIREFLOW_CONFIG"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Environment variable -> settings field
ENV_OVERRIDES = {
    "HIREFLOW_MIN_NAME_LENGTH": "min_name_length",
    "HIREFLOW_LOG_LEVEL": "log_level",
}


class EngineSettings(BaseModel):
    """Tunable settings for templates and workflows."""
    min_name_length: int = Field(5, ge=1, description="Minimum trimmed length of template/workflow names")
    log_level: str = Field("INFO", description="Level used by configure_logging()")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    """Read a YAML settings file into a mapping."""
    if not config_path.exists():
        logger.warning(f"Settings file not found: {config_path}, using defaults")
        return {}

    with open(config_path, encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {config_path} must contain a mapping at the top level")

    logger.info(f"Loaded settings from {config_path}")
    return data


def load_settings(config_path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Resolve engine settings.

    Precedence, lowest first: built-in defaults, the YAML file, environment
    variables.

    Args:
        config_path: Path to a YAML settings file. Falls back to the
                     HIREFLOW_CONFIG environment variable when omitted.

    Returns:
        Validated EngineSettings
    """
    values: Dict[str, Any] = {}

    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        values.update(_read_yaml(Path(path)))

    for env_var, field_name in ENV_OVERRIDES.items():
        if env_var in os.environ:
            values[field_name] = os.environ[env_var]

    return EngineSettings(**values)


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Process-wide settings, resolved once."""
    return load_settings()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for applications embedding the engine.

    The library itself never installs handlers.

    Args:
        level: Log level name; defaults to the configured log_level
    """
    logging.basicConfig(level=(level or get_settings().log_level).upper(), format=LOG_FORMAT)

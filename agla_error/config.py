import logging
import yaml
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class SerializationConfig(BaseModel):
    # What to_string() does when the context cannot be rendered as JSON.
    on_context_error: Literal["omit", "raise"] = "omit"
    ensure_ascii: bool = False
    sort_keys: bool = False


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    logs_dir: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        if not isinstance(value, str):
            raise ValueError("logging.level must be a level name such as 'INFO'.")
        level = value.strip().upper()
        if level == "WARN":
            level = "WARNING"
        if level not in _LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {', '.join(_LOG_LEVELS)}; got '{value}'.")
        return level


class LibraryConfig(BaseModel):
    serialization: SerializationConfig = SerializationConfig()
    logging: LoggingConfig = LoggingConfig()


def _load_yaml_mapping(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Error parsing YAML config: {exc}")

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file at {path} must contain a mapping at the top level.")
    return data


def _deep_merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: str) -> LibraryConfig:
    """
    Load YAML config, merge it with the packaged defaults, validate with Pydantic, and return a typed config object.
    Pass the result to agla_error.common.errors.apply_config() to install its serialization policy.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found at: {config_path}")

    default_config = _load_yaml_mapping(get_default_config_path())
    user_config = _load_yaml_mapping(path)
    merged_config = _deep_merge_dicts(default_config, user_config)

    try:
        config = LibraryConfig(**merged_config)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed: {e}")

    logger.debug("Configuration loaded from %s", path)
    return config


def get_default_config_path() -> Path:
    """Returns the absolute path to the default config file shipped inside the package."""
    return Path(__file__).parent / "default_config.yaml"

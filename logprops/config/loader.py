import os
from pathlib import Path
from typing import Optional, Type, TypeVar

import yaml
from instrukt_ai_logging import get_logger
from pydantic import BaseModel

from logprops.config.schema import ParserSettings
from logprops.utils import expand_env_vars

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

CONFIG_PATH_ENV = "LOGPROPS_CONFIG"
DEFAULT_CONFIG_PATH = "~/.logprops/logprops.yml"


def _warn_unknown_keys(model: BaseModel, path: str, config_path: Path) -> None:
    """Recursively warn about unknown keys in a model and its nested models."""
    if hasattr(model, "model_extra") and model.model_extra:
        logger.warning("Unknown keys in %s at %s: %s", path, config_path, list(model.model_extra.keys()))

    for field_name, field_value in model.__dict__.items():
        if isinstance(field_value, BaseModel):
            _warn_unknown_keys(field_value, f"{path}.{field_name}", config_path)


def load_config(path: Path, model_class: Type[T]) -> T:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the YAML file.
        model_class: The Pydantic model class to use for validation.

    Returns:
        The validated configuration model. Defaults when the file is absent
        or unreadable.
    """
    if not path.exists():
        return model_class()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except Exception as e:
        logger.warning("Failed to read config file %s: %s", path, e)
        return model_class()

    if not isinstance(raw, dict):
        logger.warning("Config file %s does not contain a mapping, using defaults", path)
        return model_class()

    expanded = expand_env_vars(raw)
    model = model_class.model_validate(expanded)
    _warn_unknown_keys(model, "root", path)
    return model


def resolve_config_path(path: Optional[Path] = None) -> Path:
    """Pick the settings file: explicit path, then $LOGPROPS_CONFIG, then the default."""
    if path is not None:
        return path.expanduser()
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path(DEFAULT_CONFIG_PATH).expanduser()


def load_settings(path: Optional[Path] = None) -> ParserSettings:
    """Load parser settings."""
    return load_config(resolve_config_path(path), ParserSettings)

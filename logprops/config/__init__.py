"""Parser configuration."""

from logprops.config.loader import load_config, load_settings, resolve_config_path
from logprops.config.schema import ParserSettings

__all__ = ["ParserSettings", "load_config", "load_settings", "resolve_config_path"]

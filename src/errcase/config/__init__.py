from .errors import ConfigError
from .settings import (
    CONFIG_FILE_NAME,
    GeneratorSettings,
    load_settings,
    parse_settings,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "GeneratorSettings",
    "load_settings",
    "parse_settings",
]

from .config import (
    ConfigError,
    add_config_arg,
    build_config,
    deep_merge,
    load_yaml_config,
    merge_layers,
    resolve_path,
)
from .logging import (
    DEFAULT_LOGGING,
    add_logging_args,
    setup_logging_from_config,
)

__all__ = [
    "ConfigError",
    "DEFAULT_LOGGING",
    "add_config_arg",
    "add_logging_args",
    "build_config",
    "deep_merge",
    "load_yaml_config",
    "merge_layers",
    "resolve_path",
    "setup_logging_from_config",
]

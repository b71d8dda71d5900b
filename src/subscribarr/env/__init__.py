from subscribarr.env.env import (
    ConfigError,
    Environment,
    LoggingEnvironment,
    get_env,
    get_logging_env,
    reset_env_caches,
)

from subscribarr.env.paths import home_dir

__all__ = [
    "ConfigError",
    "Environment",
    "LoggingEnvironment",
    "get_env",
    "get_logging_env",
    "reset_env_caches",
    "home_dir",
]

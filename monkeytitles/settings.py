#!/usr/bin/env python3
"""Package wrapper around the top-level settings loader."""

from settings import (
    config_path,
    load_app_config,
    get_setting,
    require_setting,
    resolve_path,
    PROJECT_ROOT,
    APP_CONFIG_PATH,
    CONFIG_ENV_VAR,
)

__all__ = [
    "config_path",
    "load_app_config",
    "get_setting",
    "require_setting",
    "resolve_path",
    "PROJECT_ROOT",
    "APP_CONFIG_PATH",
    "CONFIG_ENV_VAR",
]

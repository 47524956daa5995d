"""Utility helpers exposed by Dusky."""

from .env_tools import DuskyConfig, env_file_path, load_config
from .paths import hypr_source_dir, state_dir

__all__ = [
    "DuskyConfig",
    "env_file_path",
    "hypr_source_dir",
    "load_config",
    "state_dir",
]

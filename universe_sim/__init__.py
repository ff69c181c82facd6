#!filepath: universe_sim/__init__.py

from .utils.logger import Logging, logs, init_logging
from .config.app_config import AppConfig

__all__ = [
    "logs", "Logging", "init_logging",
    "AppConfig",
]

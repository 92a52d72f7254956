"""Configuration module for Enhancer Genie."""

from .app_config import AppConfig
from .runtime import get_logs_dir

__all__ = ["AppConfig", "get_logs_dir"]

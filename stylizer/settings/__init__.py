"""
設定模組
"""

from .app import AppSettings, get_settings, setup_logging


__all__ = ["AppSettings", "get_settings", "setup_logging"]

"""Configuration management package."""

from .settings import Config, load_config, save_config

__all__ = ["Config", "load_config", "save_config"]

"""Configuration module for intentbot."""

from intentbot.config.loader import get_config_path, load_config, save_config
from intentbot.config.schema import Config

__all__ = ["Config", "get_config_path", "load_config", "save_config"]

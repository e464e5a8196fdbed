"""
Configuration exports for inav_arbitrage.

    - ConfigState / ConfigLoader: validated YAML + environment configuration
    - get_config: resolve the config directory and load it
"""

from inav_arbitrage.config.state import ConfigLoader, ConfigState, get_config

__all__ = ["ConfigLoader", "ConfigState", "get_config"]

"""
Configuration package - unified access point.

This package provides all configuration classes. A `Config` is built once by
the command line entry point and handed to the components that need it.
"""

from permissions_updater.core.config.settings import Config

__all__ = [
    "Config",
]

"""
Configuration package for the modeling primer.
"""

from config.config import Config, config

__all__ = ["Config", "config"]

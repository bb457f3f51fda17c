"""
Utility helpers for the modeling primer.
"""

from utils.logging import set_log_level, setup_logger

__all__ = ["setup_logger", "set_log_level"]

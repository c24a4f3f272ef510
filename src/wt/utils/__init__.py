"""Utility modules for wt."""

from wt.utils.logging import WtLogger, configure_logging

__all__ = ["WtLogger", "configure_logging"]

"""Utility functions for labelstats."""

from labelstats.utils.logging import ConsoleLogger, setup_logging

__all__ = ["ConsoleLogger", "setup_logging"]

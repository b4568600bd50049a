"""Utility modules for the texture gateway."""

from .Args import Args
from .Logger import Logger

__all__ = ["Args", "Logger"]

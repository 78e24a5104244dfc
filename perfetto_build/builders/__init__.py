"""
Platform build drivers
"""

from .base_builder import BaseBuilder, format_gn_args
from .macos_builder import MacOSBuilder
from .windows_builder import WindowsBuilder

__all__ = [
    "BaseBuilder",
    "MacOSBuilder",
    "WindowsBuilder",
    "format_gn_args",
]

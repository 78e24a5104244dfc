"""
Perfetto Build Driver
Builds the Perfetto tracing toolkit's native components with GN and Ninja
Supports macOS and Windows (Git Bash)
"""

__version__ = "1.0.0"
__supported_platforms__ = ["macos", "windows"]

from .main import BuildSystem

__all__ = ["BuildSystem", "__version__", "__supported_platforms__"]

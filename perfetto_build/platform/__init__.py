"""
Platform detection
"""

import platform
import shutil
import subprocess
from enum import Enum
from typing import Optional

from .msvc import MSVCEnvironment, locate_vswhere, parse_set_output, prepend_path

WINDOWS_MARKERS = ("mingw", "msys", "windows")


class HostPlatform(str, Enum):
    """Host classification used to pick a build driver"""

    MACOS = "macos"
    WINDOWS = "windows"
    UNSUPPORTED = "unsupported"


def classify_kernel(kernel_name: str) -> HostPlatform:
    """
    Classify a kernel name as reported by ``uname -s``

    ``Darwin`` must match exactly. Git Bash and MSYS report names such as
    ``MINGW64_NT-10.0-19045`` or ``MSYS_NT-10.0``; a native Windows
    interpreter reports ``Windows``.
    """
    if kernel_name == "Darwin":
        return HostPlatform.MACOS
    lowered = kernel_name.lower()
    if any(marker in lowered for marker in WINDOWS_MARKERS):
        return HostPlatform.WINDOWS
    return HostPlatform.UNSUPPORTED


class PlatformDetector:
    """Detects the host platform once per run"""

    def __init__(self, kernel_name: Optional[str] = None):
        """
        Initialize platform detector

        Args:
            kernel_name: Known kernel name; probed from the host when omitted
        """
        self._kernel_name = kernel_name
        self._platform: Optional[HostPlatform] = None

    @property
    def kernel_name(self) -> str:
        """Kernel name from ``uname -s``, falling back to ``platform.system()``"""
        if self._kernel_name is None:
            self._kernel_name = self._probe_kernel_name()
        return self._kernel_name

    def _probe_kernel_name(self) -> str:
        uname = shutil.which("uname")
        if uname:
            try:
                result = subprocess.run(
                    [uname, "-s"],
                    capture_output=True,
                    text=True,
                    check=True
                )
                name = result.stdout.strip()
                if name:
                    return name
            except (subprocess.CalledProcessError, OSError):
                pass
        return platform.system()

    def detect(self) -> HostPlatform:
        """
        Classify the host

        Returns:
            The same HostPlatform for every call on this detector
        """
        if self._platform is None:
            self._platform = classify_kernel(self.kernel_name)
        return self._platform

    def is_macos(self) -> bool:
        return self.detect() is HostPlatform.MACOS

    def is_windows(self) -> bool:
        return self.detect() is HostPlatform.WINDOWS


__all__ = [
    "HostPlatform",
    "PlatformDetector",
    "classify_kernel",
    "MSVCEnvironment",
    "locate_vswhere",
    "parse_set_output",
    "prepend_path",
]

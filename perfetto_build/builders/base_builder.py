"""
Base builder class that both platform drivers inherit from
"""

import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ..config import BuildConfig
from ..utils import need_cmd


def format_gn_value(value: Any) -> str:
    """Render a single GN argument value"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_gn_value(v) for v in value) + "]"
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_gn_args(args: Mapping[str, Any]) -> str:
    """
    Render GN build arguments for ``gn gen --args``

    >>> format_gn_args({"is_debug": False, "target_os": "win"})
    'is_debug=false target_os="win"'
    """
    return " ".join(f"{key}={format_gn_value(value)}" for key, value in args.items())


class BaseBuilder(ABC):
    """Abstract base class for the platform build drivers"""

    display_name = "host"

    def __init__(self,
                 source_dir: Path,
                 config: BuildConfig,
                 runner: Any,
                 logger: Any,
                 which: Optional[Callable[..., Optional[str]]] = None,
                 env: Optional[Dict[str, str]] = None):
        """
        Initialize base builder

        Args:
            source_dir: Canonical Perfetto source directory
            config: Build configuration
            runner: CommandRunner used for every external command
            logger: Logger instance
            which: Command lookup, defaults to shutil.which
            env: Base environment for child processes (defaults to a copy of os.environ)
        """
        self.source_dir = Path(source_dir)
        self.config = config
        self.runner = runner
        self.logger = logger
        self.which = which or shutil.which
        self.env = dict(env) if env is not None else os.environ.copy()

    def require_commands(self, commands: Iterable[str]) -> None:
        """Fail fast if any of the commands is missing"""
        for command in commands:
            resolved = need_cmd(command, which=self.which)
            self.logger.debug(f"Found {command}: {resolved}")

    @abstractmethod
    def check_prerequisites(self) -> None:
        """Verify the toolchain before any build step runs"""
        pass

    @abstractmethod
    def build(self) -> None:
        """Run the build steps"""
        pass

    def execute(self) -> None:
        """Check prerequisites, then build"""
        self.logger.info(f"Detected {self.display_name}.")
        self.check_prerequisites()
        self.build()

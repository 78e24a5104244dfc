"""
MSVC toolchain discovery and environment activation for Windows builds
"""

from pathlib import Path, PureWindowsPath
from typing import Any, Dict, Iterable, Mapping, Optional

from ..errors import ToolchainError


def locate_vswhere(candidates: Iterable[str]) -> Optional[Path]:
    """Return the first existing vswhere.exe among the well-known locations"""
    for candidate in candidates:
        path = Path(candidate)
        if path.is_file():
            return path
    return None


def parse_set_output(output: str, base_env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Merge the output of cmd.exe's ``set`` into an environment map

    Args:
        output: ``NAME=value`` lines
        base_env: Environment the variables are layered on

    Returns:
        New environment dictionary
    """
    env = dict(base_env or {})
    keys = {key.upper(): key for key in env}
    for line in output.splitlines():
        if "=" not in line or line.startswith("="):
            continue
        key, value = line.split("=", 1)
        # Windows variable names are case-insensitive; keep a single spelling
        existing = keys.get(key.upper())
        if existing is not None and existing != key:
            del env[existing]
        env[key] = value
        keys[key.upper()] = key
    return env


def _path_key(env: Mapping[str, str]) -> str:
    for key in env:
        if key.upper() == "PATH":
            return key
    return "PATH"


def prepend_path(env: Mapping[str, str], directory: str, separator: str = ";") -> Dict[str, str]:
    """Return a copy of ``env`` with ``directory`` first on PATH"""
    new_env = dict(env)
    key = _path_key(new_env)
    current = new_env.pop(key, "")
    new_env["PATH"] = f"{directory}{separator}{current}" if current else directory
    return new_env


def search_path(env: Mapping[str, str]) -> str:
    """PATH value of an environment map"""
    return env.get(_path_key(env), "")


class MSVCEnvironment:
    """Loads the Visual Studio C++ environment into an explicit environment map"""

    def __init__(self,
                 vswhere: str,
                 runner: Any,
                 logger: Any,
                 component: str = "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
                 vcvars: str = "VC\\Auxiliary\\Build\\vcvars64.bat"):
        """
        Initialize MSVC environment manager

        Args:
            vswhere: Native path to vswhere.exe
            runner: CommandRunner used for the probe commands
            logger: Logger instance
            component: Component the installation must provide
            vcvars: Environment setup script relative to the installation
        """
        self.vswhere = vswhere
        self.runner = runner
        self.logger = logger
        self.component = component
        self.vcvars = vcvars

    def find_installation(self) -> str:
        """
        Ask vswhere for the latest installation with the C++ toolset

        Raises:
            ToolchainError: If no matching installation exists
        """
        result = self.runner.capture([
            self.vswhere, "-latest", "-products", "*",
            "-requires", self.component,
            "-property", "installationPath"
        ])
        lines = [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]
        if result.returncode != 0 or not lines:
            raise ToolchainError("Visual Studio with C++ toolset not found.")
        self.logger.debug(f"Visual Studio installation: {lines[0]}")
        return lines[0]

    def vcvars_path(self, installation: str) -> str:
        """Native path of the environment setup script"""
        return str(PureWindowsPath(installation) / self.vcvars)

    def activate(self, base_env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Run the environment setup script and capture the resulting variables

        Args:
            base_env: Environment to start from

        Returns:
            Environment map with the compiler toolchain activated

        Raises:
            ToolchainError: If the setup script fails
        """
        vcvars = self.vcvars_path(self.find_installation())
        self.logger.info(f"Loading MSVC environment: {vcvars}")
        result = self.runner.capture(
            ["cmd.exe", "/s", "/c", f'""{vcvars}" >nul && set"'],
            env=dict(base_env) if base_env is not None else None
        )
        if result.returncode != 0:
            raise ToolchainError(f"Failed to load MSVC environment from {vcvars}")
        return parse_set_output(result.stdout or "", base_env)

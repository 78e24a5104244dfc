"""Exceptions raised by the build driver

Every error carries the process exit code ``main()`` should return for it.
Environment and usage problems exit with 2; failed build steps exit with the
failing tool's own code.
"""

EXIT_ENVIRONMENT = 2


class BuildSystemError(RuntimeError):
    """Base exception for build driver errors"""

    exit_code = EXIT_ENVIRONMENT


class UsageError(BuildSystemError):
    """Raised when the command line has the wrong number of arguments"""


class PathFormatError(BuildSystemError):
    """Raised when the source path is not absolute for the host platform"""


class PathNotFoundError(BuildSystemError):
    """Raised when the source path is not an existing directory"""


class MissingCommandError(BuildSystemError):
    """Raised when a required command is not on PATH"""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Missing required command: {command}")


class MissingInterpreterError(BuildSystemError):
    """Raised when no Python 3 interpreter can be found"""


class ToolchainError(BuildSystemError):
    """Raised when a compiler toolchain component is missing or unusable"""


class UnsupportedPlatformError(BuildSystemError):
    """Raised when the host is neither macOS nor a Windows shell"""

    def __init__(self, kernel_name: str):
        self.kernel_name = kernel_name
        super().__init__(
            f"Unsupported OS: {kernel_name}. "
            "This tool targets macOS and Windows Git Bash."
        )


class ConfigurationError(BuildSystemError):
    """Raised when the build configuration cannot be loaded"""


class StepFailedError(BuildSystemError):
    """Raised when an external build step exits with a non-zero status"""

    def __init__(self, step: str, returncode: int):
        self.step = step
        self.returncode = returncode
        self.exit_code = returncode
        super().__init__(f"{step} failed with exit code {returncode}")


__all__ = [
    "EXIT_ENVIRONMENT",
    "BuildSystemError",
    "UsageError",
    "PathFormatError",
    "PathNotFoundError",
    "MissingCommandError",
    "MissingInterpreterError",
    "ToolchainError",
    "UnsupportedPlatformError",
    "ConfigurationError",
    "StepFailedError",
]

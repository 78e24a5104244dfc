#!/usr/bin/env python3
"""
Main entry point for the Perfetto build driver
Supports macOS and Windows (Git Bash)
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Type

from .builders import BaseBuilder, MacOSBuilder, WindowsBuilder
from .config import BuildConfig, ConfigLoader, load_runtime_options
from .errors import EXIT_ENVIRONMENT, BuildSystemError, UnsupportedPlatformError
from .platform import HostPlatform, PlatformDetector
from .utils import CommandRunner, Logger
from .validation import validate_arguments


class BuildSystem:
    """Dispatches a validated source tree to exactly one platform driver"""

    BUILDER_MAP: Dict[HostPlatform, Type[BaseBuilder]] = {
        HostPlatform.MACOS: MacOSBuilder,
        HostPlatform.WINDOWS: WindowsBuilder,
    }

    def __init__(self,
                 source_dir: Path,
                 config: BuildConfig,
                 logger: Logger,
                 detector: Optional[PlatformDetector] = None,
                 runner: Optional[CommandRunner] = None,
                 which: Optional[Callable[..., Optional[str]]] = None,
                 env: Optional[Dict[str, str]] = None,
                 dry_run: bool = False):
        """
        Initialize the build system

        Args:
            source_dir: Canonical Perfetto source directory
            config: Build configuration
            logger: Logger instance
            detector: Platform detector (probes the host when omitted)
            runner: Command runner shared by every step
            which: Command lookup, defaults to shutil.which
            env: Base environment for child processes
            dry_run: Log commands without running them
        """
        self.source_dir = Path(source_dir)
        self.config = config
        self.logger = logger
        self.detector = detector or PlatformDetector()
        self.runner = runner or CommandRunner(logger, dry_run=dry_run)
        self.which = which
        self.env = env

    def get_builder(self) -> BaseBuilder:
        """
        Get the driver for the host platform

        Raises:
            UnsupportedPlatformError: If the host is neither macOS nor Windows
        """
        host = self.detector.detect()
        builder_class = self.BUILDER_MAP.get(host)
        if builder_class is None:
            raise UnsupportedPlatformError(self.detector.kernel_name)

        return builder_class(
            source_dir=self.source_dir,
            config=self.config,
            runner=self.runner,
            logger=self.logger,
            which=self.which,
            env=self.env
        )

    def run(self) -> None:
        """Build the source tree on the host platform"""
        self.logger.debug(f"Kernel name: {self.detector.kernel_name}")
        self.logger.debug(f"Source directory: {self.source_dir}")
        self.get_builder().execute()


def create_parser() -> argparse.ArgumentParser:
    """Command-line parser: a single positional source path"""
    parser = argparse.ArgumentParser(
        prog="perfetto-build",
        description="Build Perfetto on macOS (full host tools) and Windows Git Bash "
                    "(trace_processor_shell via MSVC)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s /Users/dev/perfetto       # macOS
  %(prog)s 'C:\\work\\perfetto'        # Windows Git Bash

Environment:
  PERFETTO_BUILD_VERBOSE=1           Debug output with timestamps
  PERFETTO_BUILD_DRY_RUN=1           Log commands without running them
  PERFETTO_BUILD_LOG_FILE=<path>     Also write the log to a file
  PERFETTO_BUILD_CONFIG=<path>       Alternative YAML build configuration
  PERFETTO_BUILD_WIN_RUNNER=<mode>   'environment' (default) or 'script'
        """
    )
    parser.add_argument(
        "source",
        nargs="*",
        help="Absolute path to the Perfetto source tree"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None,
         detector: Optional[PlatformDetector] = None,
         runner: Optional[CommandRunner] = None,
         which: Optional[Callable[..., Optional[str]]] = None) -> int:
    """
    Command-line interface

    ``-h/--help`` is the only option; anything else is a source path.

    Returns:
        0 on success, 2 for usage and environment errors, otherwise the exit
        status of the failing build step
    """
    try:
        args = create_parser().parse_args(argv)
    except SystemExit as e:
        # argparse exits 0 after --help and 2 on an unknown option
        return e.code if isinstance(e.code, int) else EXIT_ENVIRONMENT

    options = load_runtime_options(os.environ)
    try:
        logger = Logger(verbose=options.verbose, log_file=options.log_file)
    except OSError as e:
        print(f"[ERR ] Cannot open log file {options.log_file}: {e.strerror or e}",
              file=sys.stderr)
        return EXIT_ENVIRONMENT

    try:
        sources: List[str] = args.source
        if len(sources) == 1:
            # Absoluteness depends on the host; detection only reads `uname -s`
            detector = detector or PlatformDetector()
            windows = detector.is_windows()
        else:
            windows = False
        source_dir = validate_arguments(sources, windows=windows)

        config = ConfigLoader(options.config_path).load(windows_runner=options.windows_runner)

        bs = BuildSystem(
            source_dir=source_dir,
            config=config,
            logger=logger,
            detector=detector,
            runner=runner,
            which=which,
            dry_run=options.dry_run
        )
        bs.run()

    except BuildSystemError as e:
        logger.error(str(e))
        return e.exit_code
    except OSError as e:
        location = f" ({e.filename})" if e.filename else ""
        logger.error(f"Build system error: {e.strerror or e}{location}")
        return EXIT_ENVIRONMENT
    except KeyboardInterrupt:
        print("\nBuild interrupted by user", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Utility modules for the build driver
"""

import sys
import logging
from typing import Optional, TextIO

from .probes import command_exists, detect_python, need_cmd, select_command
from .process import CommandRunner, format_command


class ColoredFormatter(logging.Formatter):
    """Severity-tagged log formatter with optional terminal colors"""

    TAGS = {
        'DEBUG': 'DEBUG',
        'INFO': 'INFO',
        'SUCCESS': ' OK ',
        'WARNING': 'WARN',
        'ERROR': 'ERR ',
        'CRITICAL': 'CRIT',
    }

    COLORS = {
        'DEBUG': '\033[1;36m',    # Cyan
        'INFO': '\033[1;34m',     # Blue
        'SUCCESS': '\033[1;32m',  # Green
        'WARNING': '\033[1;33m',  # Yellow
        'ERROR': '\033[1;31m',    # Red
        'CRITICAL': '\033[1;35m', # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_color: bool = False):
        super().__init__(fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record):
        tag = self.TAGS.get(record.levelname, record.levelname)
        if self.use_color:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            tag = f"{color}[{tag}]{self.COLORS['RESET']}"
        else:
            tag = f"[{tag}]"
        record.tag = tag
        return super().format(record)


class _BelowErrorFilter(logging.Filter):
    """Keeps errors off the standard stream"""

    def filter(self, record):
        return record.levelno < logging.ERROR


class Logger:
    """Build driver logger"""

    SUCCESS = 25  # Between INFO and WARNING

    def __init__(self,
                 verbose: bool = False,
                 log_file: Optional[str] = None,
                 stream: Optional[TextIO] = None,
                 err_stream: Optional[TextIO] = None):
        """
        Initialize logger

        Args:
            verbose: Enable debug output with timestamps
            log_file: Optional log file path
            stream: Stream for progress and warnings (default stdout)
            err_stream: Stream for errors (default stderr)
        """
        self.verbose = verbose
        stream = stream or sys.stdout
        err_stream = err_stream or sys.stderr

        logging.addLevelName(self.SUCCESS, "SUCCESS")

        self.logger = logging.getLogger("perfetto_build")
        # The file log always records debug output
        self.logger.setLevel(logging.DEBUG if verbose or log_file else logging.INFO)
        self.logger.propagate = False

        # Remove existing handlers
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()

        if verbose:
            fmt = "%(asctime)s %(tag)s %(message)s"
        else:
            fmt = "%(tag)s %(message)s"

        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        console_handler.addFilter(_BelowErrorFilter())
        console_handler.setFormatter(
            ColoredFormatter(fmt, datefmt="%H:%M:%S", use_color=_isatty(stream))
        )
        self.logger.addHandler(console_handler)

        error_handler = logging.StreamHandler(err_stream)
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            ColoredFormatter(fmt, datefmt="%H:%M:%S", use_color=_isatty(err_stream))
        )
        self.logger.addHandler(error_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                ColoredFormatter("%(asctime)s %(tag)s %(message)s",
                                 datefmt="%Y-%m-%d %H:%M:%S")
            )
            self.logger.addHandler(file_handler)

    def debug(self, msg: str):
        """Log debug message"""
        self.logger.debug(msg)

    def info(self, msg: str):
        """Log info message"""
        self.logger.info(msg)

    def warning(self, msg: str):
        """Log warning message"""
        self.logger.warning(msg)

    def error(self, msg: str):
        """Log error message"""
        self.logger.error(msg)

    def success(self, msg: str):
        """Log success message"""
        self.logger.log(self.SUCCESS, msg)


def _isatty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


__all__ = [
    "Logger",
    "ColoredFormatter",
    "CommandRunner",
    "format_command",
    "command_exists",
    "detect_python",
    "need_cmd",
    "select_command",
]

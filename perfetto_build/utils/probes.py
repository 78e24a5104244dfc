"""Host environment probes"""

import shutil
from typing import Callable, Collection, List, Optional, Sequence, Union

from ..errors import MissingCommandError, MissingInterpreterError

Which = Callable[..., Optional[str]]
Availability = Union[Callable[[str], bool], Collection[str]]


def command_exists(name: str, which: Optional[Which] = None, path: Optional[str] = None) -> bool:
    """Return True when ``name`` resolves on the executable search path"""
    which = which or shutil.which
    return which(name, path=path) is not None


def need_cmd(name: str, which: Optional[Which] = None, path: Optional[str] = None) -> str:
    """
    Require a command to be present on PATH

    Returns:
        Resolved path of the command

    Raises:
        MissingCommandError: If the command cannot be located
    """
    which = which or shutil.which
    resolved = which(name, path=path)
    if resolved is None:
        raise MissingCommandError(name)
    return resolved


def select_command(candidates: Sequence[Sequence[str]],
                   available: Availability) -> Optional[List[str]]:
    """
    Pick the first candidate command line whose executable is available

    Args:
        candidates: Command lines in priority order, e.g. ``[["python3"], ["py", "-3"]]``
        available: Either a predicate over executable names or a collection of
            executable names known to be present

    Returns:
        The chosen command line, or None if no candidate is available
    """
    if callable(available):
        is_available = available
    else:
        is_available = available.__contains__

    for candidate in candidates:
        if candidate and is_available(candidate[0]):
            return list(candidate)
    return None


def detect_python(candidates: Sequence[Sequence[str]],
                  available: Optional[Availability] = None) -> List[str]:
    """
    Find a Python 3 interpreter among the candidate command lines

    Raises:
        MissingInterpreterError: If none of the candidates exist
    """
    if available is None:
        available = command_exists
    python = select_command(candidates, available)
    if python is None:
        raise MissingInterpreterError("Python 3 not found.")
    return python

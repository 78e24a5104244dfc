import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from perfetto_build.config import ConfigLoader
from perfetto_build.utils import CommandRunner, Logger


@dataclass
class Call:
    cmd: List[str]
    cwd: Optional[Path]
    env: Optional[Dict[str, str]]

    @property
    def line(self) -> str:
        return " ".join(self.cmd)


class FakeRunner(CommandRunner):
    """Records commands instead of running them.

    ``returncodes`` and ``probes`` are keyed by a substring of the command line;
    the first matching key wins.
    """

    def __init__(self, logger, returncodes=None, probes=None, dry_run=False):
        super().__init__(logger, dry_run=dry_run)
        self.returncodes = returncodes or {}
        self.probes = probes or {}
        self.calls: List[Call] = []
        self.probed: List[List[str]] = []

    def run(self, cmd, cwd=None, env=None):
        call = Call([str(c) for c in cmd], cwd, env)
        self.calls.append(call)
        for key, code in self.returncodes.items():
            if key in call.line:
                return code
        return 0

    def capture(self, cmd, cwd=None, env=None):
        cmd = [str(c) for c in cmd]
        self.probed.append(cmd)
        if cmd[0] == "cygpath":
            return subprocess.CompletedProcess(cmd, 0, cmd[-1].replace("/", "\\") + "\n", "")
        line = " ".join(cmd)
        for key, result in self.probes.items():
            if key in line:
                if isinstance(result, int):
                    return subprocess.CompletedProcess(cmd, result, "", "")
                return subprocess.CompletedProcess(cmd, 0, result, "")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def lines(self) -> List[str]:
        return [call.line for call in self.calls]


class FakeWhich:
    """shutil.which stand-in backed by a set of command names"""

    def __init__(self, available):
        self.available = set(available)
        self.paths: List[Optional[str]] = []

    def __call__(self, name, path=None):
        self.paths.append(path)
        if name in self.available:
            return f"/usr/bin/{name}"
        return None


MACOS_COMMANDS = {"git", "curl", "python3", "xcode-select"}
WINDOWS_COMMANDS = {"git", "cygpath", "powershell.exe", "gn", "ninja", "vpython3"}


@pytest.fixture(autouse=True)
def clean_build_env(monkeypatch):
    for name in ("PERFETTO_BUILD_VERBOSE", "PERFETTO_BUILD_DRY_RUN", "PERFETTO_BUILD_LOG_FILE",
                 "PERFETTO_BUILD_CONFIG", "PERFETTO_BUILD_WIN_RUNNER"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def logger():
    return Logger()


@pytest.fixture
def config():
    return ConfigLoader().load()


@pytest.fixture
def source_dir(tmp_path_factory):
    # Neutral parent directory: tmp_path is named after the test, which can
    # collide with FakeRunner's substring matching on command lines.
    src = tmp_path_factory.mktemp("src") / "perfetto"
    src.mkdir()
    return src.resolve()


@pytest.fixture
def vswhere(tmp_path, config):
    exe = tmp_path / "Installer" / "vswhere.exe"
    exe.parent.mkdir()
    exe.write_text("")
    config.windows.vswhere_candidates = [str(tmp_path / "missing" / "vswhere.exe"), str(exe)]
    return exe

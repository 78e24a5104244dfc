import pytest

from perfetto_build.errors import ToolchainError
from perfetto_build.platform import MSVCEnvironment, locate_vswhere, parse_set_output, prepend_path

from conftest import FakeRunner

VSWHERE = "C:\\Program Files (x86)\\Microsoft Visual Studio\\Installer\\vswhere.exe"
INSTALL = "C:\\Program Files\\Microsoft Visual Studio\\2022\\BuildTools"


def test_locate_vswhere_returns_first_existing(tmp_path):
    second = tmp_path / "b" / "vswhere.exe"
    second.parent.mkdir()
    second.write_text("")
    third = tmp_path / "c" / "vswhere.exe"
    third.parent.mkdir()
    third.write_text("")

    found = locate_vswhere([str(tmp_path / "a" / "vswhere.exe"), str(second), str(third)])

    assert found == second


def test_locate_vswhere_without_installation(tmp_path):
    assert locate_vswhere([str(tmp_path / "vswhere.exe")]) is None


def test_parse_set_output_layers_on_base_env():
    output = "Path=C:\\VC\\bin;C:\\Windows\nINCLUDE=C:\\VC\\include\n=C:=C:\\work\nnot a variable\n"

    env = parse_set_output(output, {"PATH": "C:\\Windows", "HOME": "C:\\Users\\dev"})

    assert env == {
        "Path": "C:\\VC\\bin;C:\\Windows",
        "INCLUDE": "C:\\VC\\include",
        "HOME": "C:\\Users\\dev",
    }


def test_prepend_path_normalizes_key():
    env = prepend_path({"Path": "C:\\VC\\bin", "INCLUDE": "x"}, "C:\\depot_tools")
    assert env == {"PATH": "C:\\depot_tools;C:\\VC\\bin", "INCLUDE": "x"}


def test_prepend_path_on_empty_env():
    assert prepend_path({}, "C:\\depot_tools") == {"PATH": "C:\\depot_tools"}


def test_find_installation_requires_cpp_toolset(logger):
    runner = FakeRunner(logger, probes={"vswhere": "\n"})
    msvc = MSVCEnvironment(VSWHERE, runner, logger)

    with pytest.raises(ToolchainError) as excinfo:
        msvc.find_installation()

    assert "C++ toolset not found" in str(excinfo.value)
    assert runner.probed[0] == [
        VSWHERE, "-latest", "-products", "*",
        "-requires", "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
        "-property", "installationPath",
    ]


def test_activate_returns_environment_map(logger):
    runner = FakeRunner(logger, probes={
        "vswhere": INSTALL + "\n",
        "cmd.exe": "PATH=C:\\VC\\bin\nVCINSTALLDIR=" + INSTALL + "\\VC\\\n",
    })
    msvc = MSVCEnvironment(VSWHERE, runner, logger)

    env = msvc.activate({"PATH": "C:\\Windows", "USERNAME": "dev"})

    assert env["PATH"] == "C:\\VC\\bin"
    assert env["VCINSTALLDIR"] == INSTALL + "\\VC\\"
    assert env["USERNAME"] == "dev"
    assert runner.probed[1][-1] == f'""{INSTALL}\\VC\\Auxiliary\\Build\\vcvars64.bat" >nul && set"'


def test_activate_fails_when_vcvars_fails(logger):
    runner = FakeRunner(logger, probes={"vswhere": INSTALL, "cmd.exe": 1})
    msvc = MSVCEnvironment(VSWHERE, runner, logger)

    with pytest.raises(ToolchainError):
        msvc.activate({})

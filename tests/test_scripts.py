from perfetto_build.builders.scripts import (
    POWERSHELL_WRAPPER,
    BatchScriptParams,
    render_batch_script,
    write_build_scripts,
)


def _params(**overrides):
    values = dict(
        vswhere="C:\\Program Files (x86)\\Microsoft Visual Studio\\Installer\\vswhere.exe",
        component="Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
        vcvars="VC\\Auxiliary\\Build\\vcvars64.bat",
        depot_dir="C:\\work\\perfetto\\.deps\\depot_tools",
        source_dir="C:\\work\\perfetto",
        install_deps_script="tools\\install-build-deps",
        out_dir="out\\win_release",
        gn_args='is_debug=false target_os="win"',
        targets=["trace_processor_shell"],
        bootstrap_tools=["gn", "ninja", "vpython3"],
    )
    values.update(overrides)
    return BatchScriptParams(**values)


def test_wrapper_exits_with_batch_status():
    lines = POWERSHELL_WRAPPER.splitlines()
    assert lines[0] == "param([string]$BatPath)"
    assert "& $BatPath" in lines
    assert lines[-1] == "exit $LASTEXITCODE"


def test_batch_script_activates_msvc_and_depot_tools():
    script = render_batch_script(_params())

    assert 'set "VSWHERE=C:\\Program Files (x86)\\Microsoft Visual Studio\\Installer\\vswhere.exe"' in script
    assert "-requires Microsoft.VisualStudio.Component.VC.Tools.x86.x64 -property installationPath" in script
    assert 'call "%VSINSTALL%\\VC\\Auxiliary\\Build\\vcvars64.bat"' in script
    assert 'set "PATH=%DEPOT_DIR%;%PATH%"' in script
    assert 'cd /d "C:\\work\\perfetto"' in script


def test_batch_script_checks_each_bootstrapped_tool():
    script = render_batch_script(_params())
    for tool in ("gn", "ninja", "vpython3"):
        assert f"where {tool} >nul 2>&1 || (echo ERROR: {tool} not found on PATH after bootstrap.& exit /b 1)" in script


def test_batch_script_escapes_gn_args_and_propagates_status():
    script = render_batch_script(_params())

    assert 'call gn gen out\\win_release --args="is_debug=false target_os=\\"win\\""' in script
    assert script.count("if errorlevel 1 exit /b %errorlevel%") == 2
    assert "call ninja -C out\\win_release trace_processor_shell" in script


def test_dependency_install_is_best_effort_in_batch_script():
    script = render_batch_script(_params())
    install = script.index("call vpython3 tools\\install-build-deps")
    follow_up = script[install:script.index("=== GN gen")]
    assert "exit /b" not in follow_up
    assert "Continuing..." in follow_up


def test_write_build_scripts_overwrites(tmp_path):
    deps_dir = tmp_path / ".deps"
    batch, wrapper = write_build_scripts(deps_dir, "build.bat", "run.ps1", _params())
    batch.write_text("old")

    batch, wrapper = write_build_scripts(deps_dir, "build.bat", "run.ps1", _params(targets=["traceconv"]))

    assert batch == deps_dir / "build.bat"
    assert wrapper == deps_dir / "run.ps1"
    assert "call ninja -C out\\win_release traceconv" in batch.read_text()
    assert b"\r\n" in wrapper.read_bytes()

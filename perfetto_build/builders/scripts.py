"""
Generated Windows scripts for the ``script`` runner

The batch script loads the MSVC environment and runs the build inside it.
The PowerShell wrapper runs the batch script and exits with its status, which
a direct batch invocation from Git Bash does not reliably report.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

BATCH_TEMPLATE = r"""@echo off
setlocal enableextensions
set "VSWHERE={vswhere}"
set "VSINSTALL="
for /f "usebackq delims=" %%I in (`"%VSWHERE%" -latest -products * -requires {component} -property installationPath`) do set "VSINSTALL=%%~fI"
if "%VSINSTALL%"=="" (
  echo ERROR: Visual Studio with C++ toolset not found.
  exit /b 1
)
call "%VSINSTALL%\{vcvars}"

rem -- Ensure depot_tools on PATH and bootstrap it
set "DEPOT_DIR={depot_dir}"
set "PATH=%DEPOT_DIR%;%PATH%"
set "DEPOT_TOOLS_UPDATE=1"
set "DEPOT_TOOLS_WIN_TOOLCHAIN=0"

if exist "%DEPOT_DIR%\update_depot_tools.bat" (
  call "%DEPOT_DIR%\update_depot_tools.bat"
) else (
  call update_depot_tools
)
if errorlevel 1 (
  echo ERROR: update_depot_tools failed.
  exit /b 1
)

{tool_checks}

cd /d "{source_dir}"

echo.
echo === install-build-deps (best effort via vpython3) ===
call vpython3 {install_deps_script}
if errorlevel 1 (
  echo NOTE: install-build-deps returned non-zero. Continuing...
)

echo.
echo === GN gen (Windows release) ===
call gn gen {out_dir} --args="{gn_args}"
if errorlevel 1 exit /b %errorlevel%

echo.
echo === Ninja build: {targets} ===
call ninja -C {out_dir} {targets}
if errorlevel 1 exit /b %errorlevel%

echo.
echo Build completed. Artifacts in {out_dir}
exit /b 0
"""

TOOL_CHECK_TEMPLATE = (
    "where {tool} >nul 2>&1 || "
    "(echo ERROR: {tool} not found on PATH after bootstrap.& exit /b 1)"
)

POWERSHELL_WRAPPER = """param([string]$BatPath)
$ErrorActionPreference = 'Stop'
& $BatPath
exit $LASTEXITCODE
"""


@dataclass
class BatchScriptParams:
    """Values substituted into the batch script; all paths are native Windows paths"""

    vswhere: str
    component: str
    vcvars: str
    depot_dir: str
    source_dir: str
    install_deps_script: str
    out_dir: str
    gn_args: str
    targets: List[str]
    bootstrap_tools: List[str]


def render_batch_script(params: BatchScriptParams) -> str:
    """Render the batch script text"""
    tool_checks = "\n".join(TOOL_CHECK_TEMPLATE.format(tool=tool) for tool in params.bootstrap_tools)
    return BATCH_TEMPLATE.format(
        vswhere=params.vswhere,
        component=params.component,
        vcvars=params.vcvars,
        depot_dir=params.depot_dir,
        tool_checks=tool_checks,
        source_dir=params.source_dir,
        install_deps_script=params.install_deps_script,
        out_dir=params.out_dir,
        # Quotes inside the --args value have to be escaped for cmd.exe
        gn_args=params.gn_args.replace('"', '\\"'),
        targets=" ".join(params.targets),
    )


def write_build_scripts(deps_dir: Path,
                        batch_name: str,
                        wrapper_name: str,
                        params: BatchScriptParams) -> Tuple[Path, Path]:
    """
    Write the batch script and its PowerShell wrapper, replacing any earlier copies

    Returns:
        (batch script path, wrapper path)
    """
    deps_dir.mkdir(parents=True, exist_ok=True)
    batch_path = deps_dir / batch_name
    wrapper_path = deps_dir / wrapper_name
    batch_path.write_text(render_batch_script(params), encoding="utf-8", newline="\r\n")
    wrapper_path.write_text(POWERSHELL_WRAPPER, encoding="utf-8", newline="\r\n")
    return batch_path, wrapper_path

"""Contains models for the build configuration"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

GNValue = Union[bool, int, str, list[str]]


class PlatformConfig(BaseModel):
    """Settings shared by both platform drivers"""

    model_config = ConfigDict(extra="forbid")

    required_commands: list[str] = Field(default_factory=list)
    """Commands that must be on PATH before the driver runs any step"""
    install_deps_script: str
    """Dependency installer, relative to the source tree"""
    out_dir: str
    """GN output directory, relative to the source tree"""
    gn_args: dict[str, GNValue] = Field(default_factory=dict)
    """Build arguments passed to ``gn gen --args``"""
    targets: list[str]
    """Ninja targets to build"""

    @field_validator("targets")
    @classmethod
    def _targets_not_empty(cls, targets: list[str]) -> list[str]:
        """At least one target has to be requested"""
        if not targets:
            raise ValueError("at least one build target is required")
        return targets


class MacOSConfig(PlatformConfig):
    """macOS driver settings"""

    gn: str = "tools/gn"
    """GN wrapper shipped in the source tree"""
    ninja: str = "tools/ninja"
    """Ninja wrapper shipped in the source tree"""


class WindowsConfig(PlatformConfig):
    """Windows driver and toolchain bootstrap settings"""

    runner: Literal["environment", "script"] = "environment"
    """How the build steps run inside the MSVC environment"""
    vswhere_candidates: list[str] = Field(default_factory=list)
    """Well-known vswhere.exe locations, checked in order"""
    vs_component: str = "Microsoft.VisualStudio.Component.VC.Tools.x86.x64"
    """Visual Studio component the installation must provide"""
    vcvars: str = "VC\\Auxiliary\\Build\\vcvars64.bat"
    """Environment setup script, relative to the installation path"""
    deps_dir: str = ".deps"
    """Directory under the source tree holding depot_tools and generated scripts"""
    depot_tools_dir: str = "depot_tools"
    """depot_tools checkout directory inside ``deps_dir``"""
    depot_tools_url: str
    """Upstream depot_tools repository"""
    bootstrap_tools: list[str] = Field(default_factory=lambda: ["gn", "ninja", "vpython3"])
    """Tools that must resolve on PATH once depot_tools is bootstrapped"""
    batch_script: str = "perfetto_build_win.bat"
    """Generated batch script name"""
    wrapper_script: str = "perfetto_run_win.ps1"
    """Generated PowerShell wrapper name"""


class BuildConfig(BaseModel):
    """Root model for the build configuration"""

    model_config = ConfigDict(extra="forbid")

    python_candidates: list[list[str]] = Field(
        default_factory=lambda: [["python3"], ["python"], ["py", "-3"]]
    )
    """Python interpreter command lines in priority order"""
    macos: MacOSConfig
    """macOS driver settings"""
    windows: WindowsConfig
    """Windows driver settings"""

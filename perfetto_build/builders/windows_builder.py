"""
Windows (Git Bash) builder: depot_tools bootstrap, MSVC environment, GN and Ninja

Only trace_processor_shell builds unassisted on Windows, so that is the only
target requested by the default configuration.
"""

from pathlib import Path, PureWindowsPath
from typing import Dict, List, Optional

from ..errors import ToolchainError
from ..platform import MSVCEnvironment, locate_vswhere, prepend_path
from ..platform.msvc import search_path
from .base_builder import BaseBuilder, format_gn_args
from .scripts import BatchScriptParams, write_build_scripts


class WindowsBuilder(BaseBuilder):
    """Builds the supported Perfetto subset with MSVC on Windows"""

    display_name = "Windows (Git Bash)"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.platform_config = self.config.windows
        self.vswhere: Optional[Path] = None
        self.deps_dir = self.source_dir / self.platform_config.deps_dir
        self.depot_dir = self.deps_dir / self.platform_config.depot_tools_dir

    def check_prerequisites(self) -> None:
        self.require_commands(self.platform_config.required_commands)

        self.vswhere = locate_vswhere(self.platform_config.vswhere_candidates)
        if self.vswhere is None:
            raise ToolchainError(
                "vswhere.exe not found. Install VS (or Build Tools) with C++ & Windows SDK."
            )
        self.logger.debug(f"Found vswhere: {self.vswhere}")

    def to_native(self, path: Path) -> str:
        """Convert a path to its native Windows form with cygpath"""
        result = self.runner.capture(["cygpath", "-w", str(path)])
        native = (result.stdout or "").strip()
        if result.returncode != 0 or not native:
            raise ToolchainError(f"cygpath could not convert path: {path}")
        return native

    def ensure_depot_tools(self) -> Path:
        """Clone depot_tools into the dependency directory unless it is already there"""
        if self.runner.dry_run:
            self.logger.info(f"[DRY RUN] Would create: {self.deps_dir}")
        else:
            self.deps_dir.mkdir(parents=True, exist_ok=True)
        if self.depot_dir.is_dir():
            self.logger.debug(f"Reusing depot_tools checkout: {self.depot_dir}")
        else:
            self.logger.info(f"Cloning depot_tools -> {self.depot_dir}")
            self.runner.run_step(
                "git clone depot_tools",
                ["git", "clone", self.platform_config.depot_tools_url, str(self.depot_dir)],
                env=self.env
            )
        return self.depot_dir

    def build(self) -> None:
        self.ensure_depot_tools()

        if self.platform_config.runner == "script":
            self.build_with_script()
        else:
            self.build_in_environment()

        out_dir = self.source_dir / Path(PureWindowsPath(self.platform_config.out_dir).as_posix())
        self.logger.success(f"Done. Windows build artifacts in: {out_dir}")
        self.logger.info(
            f"Note: On Windows we build the supported subset "
            f"({' '.join(self.platform_config.targets)})."
        )

    def activate_environment(self) -> Dict[str, str]:
        """
        Produce the environment every Windows build step runs with

        Returns:
            MSVC variables layered on the base environment, depot_tools first
            on PATH and depot_tools auto-update enabled
        """
        cfg = self.platform_config
        msvc = MSVCEnvironment(
            vswhere=self.to_native(self.vswhere),
            runner=self.runner,
            logger=self.logger,
            component=cfg.vs_component,
            vcvars=cfg.vcvars
        )
        env = prepend_path(msvc.activate(self.env), self.to_native(self.depot_dir))
        env["DEPOT_TOOLS_UPDATE"] = "1"
        env["DEPOT_TOOLS_WIN_TOOLCHAIN"] = "0"
        return env

    @staticmethod
    def _cmd(*args: str) -> List[str]:
        # depot_tools entry points are batch files
        return ["cmd.exe", "/d", "/c", *args]

    def build_in_environment(self) -> None:
        """Run the build steps directly with the activated MSVC environment"""
        cfg = self.platform_config
        src = self.source_dir
        env = self.activate_environment()

        self.logger.info("Bootstrapping depot_tools (update_depot_tools)...")
        update_script = self.depot_dir / "update_depot_tools.bat"
        if update_script.is_file():
            update_cmd = self._cmd(self.to_native(update_script))
        else:
            update_cmd = self._cmd("update_depot_tools")
        self.runner.run_step("update_depot_tools", update_cmd, cwd=src, env=env)

        path = search_path(env)
        for tool in cfg.bootstrap_tools:
            if self.which(tool, path=path) is None:
                raise ToolchainError(f"{tool} not found on PATH after bootstrap.")

        self.logger.info("install-build-deps (best effort via vpython3)...")
        self.runner.run_best_effort(
            "install-build-deps",
            self._cmd("vpython3", cfg.install_deps_script),
            cwd=src,
            env=env
        )

        self.logger.info(f"GN gen -> {cfg.out_dir} (Windows release)")
        self.runner.run_step(
            "gn gen",
            self._cmd("gn", "gen", cfg.out_dir, f"--args={format_gn_args(cfg.gn_args)}"),
            cwd=src,
            env=env
        )

        self.logger.info(f"Ninja build: {' '.join(cfg.targets)}")
        self.runner.run_step(
            "ninja",
            self._cmd("ninja", "-C", cfg.out_dir, *cfg.targets),
            cwd=src,
            env=env
        )

    def build_with_script(self) -> None:
        """Generate the batch script and its wrapper, then run them through PowerShell"""
        cfg = self.platform_config
        params = BatchScriptParams(
            vswhere=self.to_native(self.vswhere),
            component=cfg.vs_component,
            vcvars=cfg.vcvars,
            depot_dir=self.to_native(self.depot_dir),
            source_dir=self.to_native(self.source_dir),
            install_deps_script=cfg.install_deps_script,
            out_dir=cfg.out_dir,
            gn_args=format_gn_args(cfg.gn_args),
            targets=list(cfg.targets),
            bootstrap_tools=list(cfg.bootstrap_tools),
        )
        if self.runner.dry_run:
            batch_path = self.deps_dir / cfg.batch_script
            wrapper_path = self.deps_dir / cfg.wrapper_script
            self.logger.info(f"[DRY RUN] Would write: {batch_path}")
            self.logger.info(f"[DRY RUN] Would write: {wrapper_path}")
        else:
            batch_path, wrapper_path = write_build_scripts(
                self.deps_dir, cfg.batch_script, cfg.wrapper_script, params
            )
        batch_native = self.to_native(batch_path)
        wrapper_native = self.to_native(wrapper_path)

        self.logger.info("Running Windows build steps via PowerShell runner:")
        self.logger.info(f"  BAT: {batch_native}")
        self.logger.info(f"  PS1: {wrapper_native}")

        self.runner.run_step(
            "Windows build script",
            ["powershell.exe", "-NoLogo", "-NoProfile", "-ExecutionPolicy", "Bypass",
             "-File", wrapper_native, batch_native],
            env=self.env
        )

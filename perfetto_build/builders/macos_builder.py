"""
macOS builder: full host tools via GN and Ninja
"""

from typing import List

from ..errors import ToolchainError
from ..utils import detect_python
from .base_builder import BaseBuilder, format_gn_args


class MacOSBuilder(BaseBuilder):
    """Builds the Perfetto host tools on macOS"""

    display_name = "macOS"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.platform_config = self.config.macos
        self.python: List[str] = []

    def check_prerequisites(self) -> None:
        self.require_commands(self.platform_config.required_commands)
        self.python = detect_python(
            self.config.python_candidates,
            available=lambda name: self.which(name) is not None
        )
        self.logger.debug(f"Using Python: {' '.join(self.python)}")

        if self.runner.capture(["xcode-select", "-p"]).returncode != 0:
            raise ToolchainError(
                "Xcode Command Line Tools are required. Install with: xcode-select --install"
            )

    def build(self) -> None:
        cfg = self.platform_config
        src = self.source_dir

        self.logger.info("Installing Perfetto deps (toolchains, third_party)...")
        self.runner.run_best_effort(
            "install-build-deps",
            [*self.python, str(src / cfg.install_deps_script)],
            cwd=src,
            env=self.env
        )

        self.logger.info(f"GN gen -> {cfg.out_dir} (release, demote deprecated decls)")
        self.runner.run_step(
            "gn gen",
            [str(src / cfg.gn), "gen", cfg.out_dir, f"--args={format_gn_args(cfg.gn_args)}"],
            cwd=src,
            env=self.env
        )

        self.logger.info(f"Building targets: {' '.join(cfg.targets)}")
        self.runner.run_step(
            "ninja",
            [str(src / cfg.ninja), "-C", cfg.out_dir, *cfg.targets],
            cwd=src,
            env=self.env
        )

        self.logger.success(f"Done. Artifacts in: {src / cfg.out_dir}")

"""
Purpose: Extend setuptools build to bundle the biome binary into bunb wheels.
Key Exports: build_py override that stages biome under bunb/_embedded.
Role: Packaging bridge producing a single-install bunb distribution.
Invariants: BUNB_BIOME_BINARY remains a runtime override; the bundled binary is optional for source installs.
Invariants: Wheels include at most one biome binary next to the default biome.json.
Notes: Prefers BUNB_BIOME_SOURCE, then falls back to binaries/biome-<platform> from cmd/fetch_biome.py.
"""

from __future__ import annotations

import os
import platform
import shutil
import sys
from pathlib import Path

from setuptools import setup
from setuptools.command.build_py import build_py

try:
    from setuptools.command.bdist_wheel import bdist_wheel
except ImportError:  # pragma: no cover - fallback for older setuptools
    from wheel.bdist_wheel import bdist_wheel


class BuildPyWithEmbeddedBiome(build_py):
    """Copy the biome binary into the package before wheel build."""

    _EMBEDDED_BINARIES = ("biome", "biome.exe")

    def run(self) -> None:
        self._bundle_biome()
        super().run()

    def _bundle_biome(self) -> None:
        project_root = Path(__file__).resolve().parent
        embedded_dir = project_root / "bunb" / "_embedded"
        embedded_dir.mkdir(parents=True, exist_ok=True)

        for filename in self._EMBEDDED_BINARIES:
            candidate = embedded_dir / filename
            if candidate.exists():
                candidate.unlink()

        src = self._biome_candidate(project_root)
        if src.exists():
            dst = embedded_dir / ("biome.exe" if os.name == "nt" else "biome")
            shutil.copy2(src, dst)
            dst.chmod(0o755)

    def _biome_candidate(self, project_root: Path) -> Path:
        source_env = os.environ.get("BUNB_BIOME_SOURCE")
        if source_env:
            return Path(source_env)

        system = "darwin" if sys.platform == "darwin" else "linux"
        machine = "arm64" if platform.machine().lower() in ("arm64", "aarch64") else "x64"
        return project_root / "binaries" / f"biome-{system}-{machine}"


class BdistWheelWithEmbeddedBiome(bdist_wheel):
    """Emit platform-tagged wheels because the bundled binary is platform-specific."""

    def finalize_options(self) -> None:
        super().finalize_options()
        self.root_is_pure = False


setup(
    name="bunb",
    version="0.1.0",
    description="Single command surface for the bun runtime and the biome formatter/linter",
    python_requires=">=3.9",
    packages=["bunb"],
    package_data={"bunb": ["_embedded/*"]},
    include_package_data=True,
    install_requires=[],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["bunb = bunb._cli:main"]},
    cmdclass={"build_py": BuildPyWithEmbeddedBiome, "bdist_wheel": BdistWheelWithEmbeddedBiome},
)

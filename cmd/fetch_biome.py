"""
Purpose: Download the pinned biome release binary for a platform ahead of a wheel build.
Key Exports: main (script entrypoint), detect_platform(), tarball_url(), fetch_biome().
Role: Supplies binaries/biome-<platform>, which setup.py stages into bunb/_embedded.
Invariants: One binary per platform; an existing binary is never re-downloaded.
Invariants: The extracted binary is executable (0o755).
Notes: Build-time only; the bunb runtime never touches the network.
"""

from __future__ import annotations

import io
import platform as platform_mod
import sys
import tarfile
import urllib.request
from pathlib import Path
from typing import Optional

BIOME_VERSION = "1.9.4"

PLATFORM_PACKAGES = {
    "darwin-arm64": "@biomejs/cli-darwin-arm64",
    "darwin-x64": "@biomejs/cli-darwin-x64",
    "linux-x64": "@biomejs/cli-linux-x64",
    "linux-arm64": "@biomejs/cli-linux-arm64",
}

_MACHINES = {
    "arm64": "arm64",
    "aarch64": "arm64",
    "x86_64": "x64",
    "amd64": "x64",
}

TARBALL_MEMBER = "package/biome"


def detect_platform(system: Optional[str] = None, machine: Optional[str] = None) -> str:
    system = (system or sys.platform).lower()
    machine = (machine or platform_mod.machine()).lower()
    os_name = "darwin" if system == "darwin" else "linux" if system.startswith("linux") else system
    name = f"{os_name}-{_MACHINES.get(machine, machine)}"
    if name not in PLATFORM_PACKAGES:
        raise RuntimeError(f"unsupported platform: {name}")
    return name


def tarball_url(platform: str, version: str = BIOME_VERSION) -> str:
    package = PLATFORM_PACKAGES[platform]
    basename = package.split("/")[1]
    return f"https://registry.npmjs.org/{package}/-/{basename}-{version}.tgz"


def fetch_biome(platform: str, binaries_dir: Path, version: str = BIOME_VERSION) -> Path:
    binary_path = binaries_dir / f"biome-{platform}"
    if binary_path.exists():
        print(f"biome binary already exists: {binary_path}")
        return binary_path

    binaries_dir.mkdir(parents=True, exist_ok=True)
    url = tarball_url(platform, version)
    print(f"downloading biome from: {url}")
    with urllib.request.urlopen(url) as response:
        payload = response.read()

    with tarfile.open(fileobj=io.BytesIO(payload), mode="r:gz") as archive:
        try:
            member = archive.extractfile(TARBALL_MEMBER)
        except KeyError:
            member = None
        if member is None:
            raise RuntimeError(f"{TARBALL_MEMBER} missing from {url}")
        binary_path.write_bytes(member.read())
    binary_path.chmod(0o755)

    print(f"downloaded biome to: {binary_path}")
    return binary_path


def main() -> int:
    if len(sys.argv) > 2:
        raise RuntimeError("usage: fetch_biome.py [platform]")
    if len(sys.argv) == 2:
        platform = sys.argv[1]
        if platform not in PLATFORM_PACKAGES:
            print(f"unknown platform: {platform}", file=sys.stderr)
            print(f"supported platforms: {', '.join(PLATFORM_PACKAGES)}", file=sys.stderr)
            return 1
    else:
        platform = detect_platform()

    project_root = Path(__file__).resolve().parents[1]
    fetch_biome(platform, project_root / "binaries")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import logging
from typing import List, Sequence

from .host import Host

logger = logging.getLogger(__name__)


def apt_update(host: Host) -> None:
    host.run(["apt-get", "update"], sudo=True)


def apt_upgrade(host: Host) -> None:
    host.run(["apt-get", "upgrade", "-y"], sudo=True)


def apt_install(host: Host, packages: Sequence[str]) -> None:
    if not packages:
        return
    host.run(["apt-get", "install", "-y", *packages], sudo=True)


def apt_fix_broken(host: Host) -> None:
    host.run(["apt-get", "--fix-broken", "install", "-y"], sudo=True)


def apt_purge(host: Host, packages: Sequence[str]) -> None:
    if not packages:
        return
    host.run(["apt-get", "remove", "--purge", "-y", *packages], sudo=True)
    host.run(["apt-get", "autoremove", "-y"], sudo=True)
    host.run(["apt-get", "autoclean"], sudo=True)


def dpkg_install(host: Host, deb_path: str, *, check: bool = True) -> bool:
    """Install a local .deb; with check=False missing dependencies are left for apt to fix."""
    r = host.run(["dpkg", "-i", deb_path], sudo=True, check=check)
    return r.ok


def missing_packages(host: Host, packages: Sequence[str]) -> List[str]:
    return [p for p in packages if not host.package_installed(p)]


def write_sources_entry(host: Host, name: str, line: str) -> str:
    """Write /etc/apt/sources.list.d/<name>.list containing a single entry."""

    path = f"/etc/apt/sources.list.d/{name}.list"
    host.write_file(path, line.rstrip("\n") + "\n")
    logger.info("Configured apt source %s: %s", path, line)
    return path

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import UnsupportedEnvironmentError
from .host import Host

logger = logging.getLogger(__name__)

# uname -m -> Debian architecture used in release artifact names.
_ARTIFACT_ARCH_MAP = {
    "x86_64": "amd64",
    "aarch64": "arm64",
}


@dataclass(frozen=True)
class OsRelease:
    distributor: str
    release: str
    codename: str


def artifact_arch(machine: str) -> str:
    """Map a machine name to the artifact suffix; anything unknown is fatal."""

    arch = _ARTIFACT_ARCH_MAP.get(machine)
    if arch is None:
        raise UnsupportedEnvironmentError(f"Unsupported architecture: {machine}")
    return arch


def _lsb(host: Host, flag: str) -> str:
    out = host.output(["lsb_release", flag])
    return (out or "").strip()


def read_os_release(host: Host) -> OsRelease:
    return OsRelease(
        distributor=_lsb(host, "-is"),
        release=_lsb(host, "-rs"),
        codename=_lsb(host, "-cs"),
    )


def primary_ip(host: Host) -> Optional[str]:
    """First address reported by ``hostname -I`` (best-effort)."""

    out = host.output(["hostname", "-I"])
    if not out:
        return None
    parts = out.split()
    return parts[0] if parts else None

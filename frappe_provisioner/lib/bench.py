from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .command import CmdResult
from .host import Host

logger = logging.getLogger(__name__)


def bench(
    host: Host,
    args: Sequence[str],
    *,
    cwd: Path,
    secrets: Sequence[str] = (),
    capture: bool = True,
) -> CmdResult:
    return host.run(["bench", *args], cwd=str(cwd), secrets=secrets, capture=capture)


def bench_available(host: Host) -> bool:
    return host.succeeds(["bench", "--version"])


def site_apps(host: Host, workspace: Path, site: str) -> list[str]:
    r = host.run(
        ["bench", "--site", site, "list-apps"],
        cwd=str(workspace),
        check=False,
        read_only=True,
    )
    if not r.ok:
        return []
    # Newer benches print "erpnext 15.x.y version-15"; keep the app name only.
    return [line.split()[0] for line in r.stdout.splitlines() if line.strip()]

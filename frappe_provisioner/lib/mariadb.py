from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from .host import Host

logger = logging.getLogger(__name__)

PACKAGES = ["mariadb-server", "mariadb-client"]
PURGE_PACKAGES = ["mariadb-server", "mariadb-client", "mariadb-common"]
DATA_DIRS = ["/etc/mysql", "/var/lib/mysql"]
# skip-name-resolve is on, so TCP clients match root@127.0.0.1 only.
TCP_HOST = "127.0.0.1"

# "mariadb  Ver 15.1 Distrib 10.6.16-MariaDB, for debian-linux-gnu (x86_64) ..."
# "mariadb from 11.4.2-MariaDB, client 15.2 for debian-linux-gnu (x86_64)"
_VERSION_RE = re.compile(r"(\d+\.\d+\.\d+)-MariaDB")


def parse_version(text: str) -> Optional[str]:
    m = _VERSION_RE.search(text or "")
    return m.group(1) if m else None


def installed_version(host: Host) -> Optional[str]:
    out = host.output(["mariadb", "--version"])
    if out is None:
        return None
    return parse_version(out)


def is_installed(host: Host) -> bool:
    return any(host.package_installed(p) for p in PACKAGES)


def version_matches(version: Optional[str], pin: str) -> bool:
    """True when ``version`` belongs to the pinned major.minor series."""

    if not version:
        return False
    return version == pin or version.startswith(pin + ".")


def sql_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def mysql_exec(
    host: Host,
    sql: str,
    *,
    password: Optional[str] = None,
    check: bool = True,
    secrets: Sequence[str] = (),
):
    """Run SQL as the root account, via socket auth or with ``password``."""

    argv = ["mysql"]
    secrets = list(secrets)
    if password is not None:
        argv += ["-u", "root", f"-p{password}"]
        secrets.append(password)
    argv += ["-e", sql]
    return host.run(argv, sudo=True, check=check, secrets=secrets)


def tcp_login(password: str) -> List[str]:
    """Client argv for root over TCP, as bench connects.

    unix_socket auth only applies to socket connections, so a TCP login
    succeeds on the password alone, whoever runs it.
    """

    return ["mysql", "--protocol=TCP", "-h", TCP_HOST, "-u", "root", f"-p{password}"]


def can_authenticate(host: Host, password: str) -> bool:
    return host.succeeds([*tcp_login(password), "-e", "SELECT 1;"], secrets=[password])


def query_scalar(host: Host, sql: str, *, password: str) -> Optional[str]:
    return host.output([*tcp_login(password), "-N", "-B", "-e", sql], secrets=[password])

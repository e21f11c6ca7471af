from __future__ import annotations

import logging
import re
import shlex
from typing import Optional, Tuple

from .host import Host

logger = logging.getLogger(__name__)

_PY_VERSION_RE = re.compile(r"Python\s+(\d+(?:\.\d+)*)")


def parse_version_tuple(text: str) -> Tuple[int, ...]:
    parts = []
    for piece in text.strip().split("."):
        m = re.match(r"\d+", piece)
        if not m:
            break
        parts.append(int(m.group(0)))
    return tuple(parts)


def version_at_least(current: Optional[str], minimum: str) -> bool:
    if not current:
        return False
    return parse_version_tuple(current) >= parse_version_tuple(minimum)


def python3_version(host: Host) -> Optional[str]:
    out = host.output(["python3", "--version"])
    if not out:
        return None
    m = _PY_VERSION_RE.search(out)
    return m.group(1) if m else None


def nvm_shell(host: Host, script: str) -> str:
    """Wrap ``script`` so it runs with nvm loaded into a fresh bash."""

    nvm_dir = shlex.quote(str(host.home / ".nvm"))
    return f'export NVM_DIR={nvm_dir}; [ -s "$NVM_DIR/nvm.sh" ] && . "$NVM_DIR/nvm.sh"; {script}'


def nvm_node_bin_dir(host: Host, major: int) -> Optional[str]:
    """Directory holding nvm's node for ``major``, or None if not installed."""

    out = host.output(["bash", "-c", nvm_shell(host, f"nvm which {int(major)}")])
    if not out:
        return None
    node_path = out.strip().splitlines()[-1]
    if not node_path.endswith("/node"):
        return None
    return node_path[: -len("/node")]

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from .host import Host
from .pkg import write_sources_entry

logger = logging.getLogger(__name__)

KEYRINGS_DIR = "/etc/apt/keyrings"


def install_signing_key(host: Host, *, key_url: str, keyring_name: str) -> str:
    """Fetch an ASCII-armored signing key and de-armor it into the keyrings dir.

    Returns the keyring path to reference from ``signed-by=``.
    """

    keyring = str(PurePosixPath(KEYRINGS_DIR) / keyring_name)
    host.run(["mkdir", "-p", KEYRINGS_DIR], sudo=True)
    armored = host.run(["curl", "-fsSL", key_url]).stdout
    host.run(["gpg", "--dearmor", "--yes", "-o", keyring], sudo=True, input_text=armored)
    logger.info("Installed signing key %s -> %s", key_url, keyring)
    return keyring


def add_signed_repository(
    host: Host,
    *,
    name: str,
    key_url: str,
    repo_url: str,
    suite: str,
    component: str = "main",
    archs: str = "amd64,arm64,ppc64el",
) -> str:
    """Register a third-party apt repository signed by its own keyring.

    Output:
      /etc/apt/keyrings/<name>-keyring.gpg
      /etc/apt/sources.list.d/<name>.list
        deb [arch=<archs> signed-by=<keyring>] <repo_url> <suite> <component>
    """

    keyring = install_signing_key(host, key_url=key_url, keyring_name=f"{name}-keyring.gpg")
    line = f"deb [arch={archs} signed-by={keyring}] {repo_url} {suite} {component}"
    return write_sources_entry(host, name, line)

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import UnsupportedEnvironmentError
from .lib.hwdetect import read_os_release
from .state import RunState

if TYPE_CHECKING:
    from .pipeline import ProvisionContext

logger = logging.getLogger(__name__)


def run_preflight(ctx: "ProvisionContext", state: RunState) -> RunState:
    """Refuse to touch anything on an unsupported host.

    Reads distributor, release and codename; no side effects.
    """

    release = read_os_release(ctx.host)
    state.os_name = release.distributor
    state.os_version = release.release
    state.os_codename = release.codename
    state.machine = ctx.host.machine()

    cfg = ctx.config
    if release.distributor != cfg.supported_distributor:
        raise UnsupportedEnvironmentError(
            f"Unsupported Operating System: {release.distributor or 'unknown'}. "
            f"Only {cfg.supported_distributor} is supported."
        )

    if release.release not in cfg.supported_versions:
        raise UnsupportedEnvironmentError(
            f"Unsupported {cfg.supported_distributor} version: {release.release or 'unknown'}. "
            f"Supported versions are: {', '.join(cfg.supported_versions)}."
        )

    logger.info(
        "Preflight passed: %s %s (%s) on %s",
        release.distributor,
        release.release,
        release.codename,
        state.machine,
    )
    return state

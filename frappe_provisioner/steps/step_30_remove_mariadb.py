from __future__ import annotations

import logging
from typing import Optional

from ..errors import ProvisionError
from ..lib import mariadb
from ..lib.pkg import apt_purge
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)


class RemoveMismatchedMariaDBStep(BaseStep):
    step_id = "30_remove_mariadb"
    description = "Remove a MariaDB installation of the wrong version"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        pin = ctx.config.mariadb_version
        if not mariadb.is_installed(ctx.host):
            return "no existing MariaDB installation found"
        state.mariadb_version = mariadb.installed_version(ctx.host)
        if mariadb.version_matches(state.mariadb_version, pin):
            return f"MariaDB {pin} is already installed ({state.mariadb_version})"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        found = state.mariadb_version or "unknown"
        logger.warning(
            "Existing MariaDB %s does not match pinned %s: removal purges %s",
            found,
            ctx.config.mariadb_version,
            " and ".join(mariadb.DATA_DIRS),
        )
        if not ctx.prompter.ask_yes_no(
            f"Remove MariaDB {found} and ALL of its databases to install {ctx.config.mariadb_version}?"
        ):
            raise ProvisionError(f"Operator declined removal of MariaDB {found}")

        host = ctx.host
        # The service may already be stopped or missing.
        host.run(["systemctl", "stop", "mariadb"], sudo=True, check=False)
        apt_purge(host, mariadb.PURGE_PACKAGES)
        host.run(["rm", "-rf", *mariadb.DATA_DIRS], sudo=True)
        state.mariadb_version = None
        logger.warning("Existing MariaDB installation (%s) removed", found)
        return state

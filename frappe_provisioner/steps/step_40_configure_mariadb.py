from __future__ import annotations

import logging
from typing import Optional

from ..lib.templates import render_template
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

TEMPLATE = "mariadb-50-server.cnf"


def backup_path(config_path: str) -> str:
    return config_path + ".bak"


class ConfigureMariaDBStep(BaseStep):
    step_id = "40_configure_mariadb"
    description = "Write the MariaDB server configuration"

    def _rendered(self, ctx: ProvisionContext) -> str:
        return render_template(TEMPLATE, mariadb_version=ctx.config.mariadb_version)

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        path = ctx.config.mariadb_config_path
        if not ctx.host.path_exists(backup_path(path)):
            return None
        if ctx.host.read_file(path) != self._rendered(ctx):
            return None
        return f"{path} is already configured and backed up"

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        host = ctx.host
        path = ctx.config.mariadb_config_path
        backup = backup_path(path)

        # The backup must hold the distribution's original, so take it once.
        if host.path_exists(backup):
            logger.info("Backup of MariaDB configuration already exists: %s", backup)
        else:
            host.run(["cp", path, backup], sudo=True)
            logger.info("Original MariaDB configuration backed up to %s", backup)

        host.write_file(path, self._rendered(ctx))
        logger.info("Restarting MariaDB to apply new configuration")
        host.run(["systemctl", "restart", "mariadb"], sudo=True)
        ctx.pace()
        return state

from __future__ import annotations

import logging
from typing import Optional

from ..errors import VersionMismatchError
from ..lib import mariadb
from ..lib.apt_repo import add_signed_repository
from ..lib.pkg import apt_install, apt_update
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)


class InstallMariaDBStep(BaseStep):
    step_id = "35_install_mariadb"
    description = "Install the pinned MariaDB release from its repository"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        pin = ctx.config.mariadb_version
        version = mariadb.installed_version(ctx.host)
        if mariadb.version_matches(version, pin):
            state.mariadb_version = version
            return f"MariaDB {version} matches pinned {pin}"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        cfg = ctx.config
        host = ctx.host
        logger.info("Installing MariaDB %s", cfg.mariadb_version)

        apt_install(host, ["software-properties-common", "dirmngr"])
        add_signed_repository(
            host,
            name="mariadb",
            key_url=cfg.mariadb_key_url,
            repo_url=cfg.mariadb_repo_url,
            suite=state.os_codename or "",
        )
        apt_update(host)
        apt_install(host, mariadb.PACKAGES)
        ctx.pace()
        return state

    def verify(self, ctx: ProvisionContext, state: RunState) -> None:
        pin = ctx.config.mariadb_version
        version = mariadb.installed_version(ctx.host)
        state.mariadb_version = version
        if not mariadb.version_matches(version, pin):
            raise VersionMismatchError(
                f"MariaDB {pin} installation failed. Installed version: {version or 'none'}"
            )
        logger.info("MariaDB %s installed successfully", version)

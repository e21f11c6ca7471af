from __future__ import annotations

import logging
from typing import Optional

from ..lib.bench import bench, site_apps
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

APP = "erpnext"


class InstallErpnextStep(BaseStep):
    step_id = "75_erpnext"
    description = "Optionally install ERPNext on the site"

    def prepare(self, ctx: ProvisionContext, state: RunState) -> RunState:
        if state.install_erpnext is None:
            state.install_erpnext = ctx.prompter.ask_yes_no("Would you like to install ERPNext?")
        return state

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        if not state.install_erpnext:
            return "ERPNext installation declined"
        if APP in site_apps(ctx.host, ctx.workspace, str(state.site_name)):
            return f"ERPNext is already installed on {state.site_name}"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        host = ctx.host
        if host.path_exists(str(ctx.workspace / "apps" / APP)):
            logger.info("ERPNext app already fetched")
        else:
            bench(host, ["get-app", APP, "--branch", ctx.config.erpnext_branch], cwd=ctx.workspace, capture=False)
        bench(host, ["--site", str(state.site_name), "install-app", APP], cwd=ctx.workspace)
        logger.info("ERPNext installed on %s", state.site_name)
        ctx.pace()
        return state

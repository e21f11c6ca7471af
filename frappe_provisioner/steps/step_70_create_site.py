from __future__ import annotations

import logging
from typing import Optional

from ..lib.bench import bench
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep
from .step_45_secure_mariadb import collect_db_root_password

logger = logging.getLogger(__name__)

SITE_PROMPT = "Enter the site name (use FQDN if you plan to install SSL)"
ADMIN_PROMPT = "Enter the Administrator password"


class CreateSiteStep(BaseStep):
    step_id = "70_create_site"
    description = "Create the Frappe site"

    def prepare(self, ctx: ProvisionContext, state: RunState) -> RunState:
        if not state.site_name:
            state.site_name = ctx.prompter.ask_text(SITE_PROMPT)
        return state

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        site_dir = ctx.workspace / "sites" / str(state.site_name)
        if ctx.host.path_exists(str(site_dir)):
            return f"site {state.site_name} already exists"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        state = collect_db_root_password(ctx, state)
        if state.admin_password is None:
            state.admin_password = ctx.prompter.collect_confirmed(ADMIN_PROMPT, is_secret=True)

        logger.info("Creating new site: %s", state.site_name)
        bench(
            ctx.host,
            [
                "new-site",
                str(state.site_name),
                "--db-root-password",
                state.db_root_password or "",
                "--admin-password",
                state.admin_password,
            ],
            cwd=ctx.workspace,
            secrets=[state.db_root_password or "", state.admin_password],
        )
        logger.info("Site %s created", state.site_name)
        ctx.pace()
        return state

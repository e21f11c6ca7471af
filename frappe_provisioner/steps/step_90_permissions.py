from __future__ import annotations

import logging

from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)


class ApplyWorkspacePermissionsStep(BaseStep):
    step_id = "90_permissions"
    description = "Relax permissions on the bench workspace"

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        mode = ctx.config.workspace_mode
        ctx.host.run(["chmod", "-R", mode, str(ctx.workspace)], sudo=True)
        logger.info("Applied mode %s to %s", mode, ctx.workspace)
        return state

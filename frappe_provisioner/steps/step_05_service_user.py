from __future__ import annotations

import logging
from typing import Optional

from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)


class EnsureServiceUserStep(BaseStep):
    step_id = "05_service_user"
    description = "Create the dedicated service account"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        user = ctx.config.service_user
        if ctx.host.user_exists(user):
            return f"user '{user}' already exists"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        user = ctx.config.service_user
        ctx.host.run(["adduser", "--disabled-password", "--gecos", "", user], sudo=True)
        logger.info("Created user '%s'", user)
        return state

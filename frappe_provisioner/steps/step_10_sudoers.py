from __future__ import annotations

import logging
from typing import Optional

from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

SUDOERS_MODE = "0440"


def sudoers_path(user: str) -> str:
    return f"/etc/sudoers.d/{user}"


def sudoers_line(user: str) -> str:
    return f"{user} ALL=(ALL) NOPASSWD:ALL"


class GrantSudoersStep(BaseStep):
    step_id = "10_sudoers"
    description = "Grant the service account passwordless sudo"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        user = ctx.config.service_user
        # The drop-in is 0440 root:root, so the check itself needs sudo.
        if ctx.host.file_has_line(sudoers_path(user), sudoers_line(user), sudo=True):
            return f"'{user}' already has sudo privileges"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        user = ctx.config.service_user
        ctx.host.write_file(sudoers_path(user), sudoers_line(user) + "\n", mode=SUDOERS_MODE)
        logger.info("Granted '%s' passwordless sudo via %s", user, sudoers_path(user))
        return state

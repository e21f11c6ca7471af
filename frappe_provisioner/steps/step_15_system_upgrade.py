from __future__ import annotations

from ..lib.pkg import apt_update, apt_upgrade
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep


class UpgradeSystemStep(BaseStep):
    step_id = "15_system_upgrade"
    description = "Refresh the package index and upgrade installed packages"

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        apt_update(ctx.host)
        apt_upgrade(ctx.host)
        return state

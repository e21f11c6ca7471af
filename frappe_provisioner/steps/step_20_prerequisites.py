from __future__ import annotations

import logging
from typing import Optional

from ..lib.pkg import apt_install, missing_packages
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)


class InstallPrerequisitesStep(BaseStep):
    step_id = "20_prerequisites"
    description = "Install build and runtime prerequisites"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        if not missing_packages(ctx.host, ctx.config.prerequisites):
            return "all prerequisite packages are installed"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        packages = ctx.config.prerequisites
        logger.info("Installing %d prerequisite packages", len(packages))
        # Install the whole list in one transaction, apt skips what is present.
        apt_install(ctx.host, packages)
        ctx.pace()
        return state

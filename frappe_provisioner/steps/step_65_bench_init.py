from __future__ import annotations

import logging
from typing import Optional

from ..lib.bench import bench
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)


class InitBenchStep(BaseStep):
    step_id = "65_bench_init"
    description = "Initialize the bench workspace"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        if ctx.host.path_exists(str(ctx.workspace / "apps" / "frappe")):
            return f"{ctx.workspace} is already initialized"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        cfg = ctx.config
        logger.info("Initializing bench in %s (frappe %s)", ctx.workspace, cfg.frappe_branch)
        bench(
            ctx.host,
            ["init", cfg.bench_dir, "--frappe-branch", cfg.frappe_branch, "--verbose"],
            cwd=ctx.host.home,
            capture=False,
        )
        ctx.pace()
        return state

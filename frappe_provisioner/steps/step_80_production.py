from __future__ import annotations

from typing import List, Optional

from ..lib.bench import bench
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep


def production_configs(bench_dir: str) -> List[str]:
    """Links bench drops into supervisor and nginx when production is set up."""

    name = bench_dir.rstrip("/").split("/")[-1]
    return [
        f"/etc/supervisor/conf.d/{name}.conf",
        f"/etc/nginx/conf.d/{name}.conf",
    ]


class SetupProductionStep(BaseStep):
    step_id = "80_production"
    description = "Configure nginx and supervisor for production"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        paths = production_configs(ctx.config.bench_dir)
        if all(ctx.host.path_exists(p) for p in paths):
            return "production configuration is already in place"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        bench(ctx.host, ["setup", "production", ctx.host.user], cwd=ctx.workspace, capture=False)
        ctx.pace()
        return state

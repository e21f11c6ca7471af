from __future__ import annotations

from typing import Optional

from ..lib.bench import bench_available
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep


class InstallBenchCliStep(BaseStep):
    step_id = "60_bench_cli"
    description = "Install the bench CLI"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        if bench_available(ctx.host):
            return "bench is already installed"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        ctx.host.run(["pip3", "install", "frappe-bench"], sudo=True)
        ctx.pace()
        return state

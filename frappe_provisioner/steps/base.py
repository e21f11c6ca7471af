from __future__ import annotations

from typing import Optional

from ..pipeline import ProvisionContext
from ..state import RunState


class BaseStep:
    """Defaults for steps: no inputs, always run, nothing to verify."""

    step_id = ""
    description = ""

    def prepare(self, ctx: ProvisionContext, state: RunState) -> RunState:
        return state

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        raise NotImplementedError

    def verify(self, ctx: ProvisionContext, state: RunState) -> None:
        return None

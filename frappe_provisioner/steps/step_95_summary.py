from __future__ import annotations

import logging

from rich.panel import Panel

from ..lib.hwdetect import primary_ip
from ..pipeline import ProvisionContext
from ..state import RunState, StepStatus
from .base import BaseStep
from .step_85_ssl import InstallTlsCertificateStep

logger = logging.getLogger(__name__)

DOCS_URL = "https://docs.erpnext.com"


def ssl_in_place(state: RunState) -> bool:
    """True when the certificate step ran, or found a certificate already there."""

    if not state.install_ssl:
        return False
    outcome = state.outcome_for(InstallTlsCertificateStep.step_id)
    return outcome is not None and outcome.status is not StepStatus.FAILED


def access_url(state: RunState) -> str:
    if ssl_in_place(state):
        return f"https://{state.site_name}"
    return f"http://{state.server_ip or state.site_name}"


class PrintSummaryStep(BaseStep):
    step_id = "95_summary"
    description = "Print the access summary"

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        if not ssl_in_place(state):
            state.server_ip = primary_ip(ctx.host)

        product = "Frappe and ERPNext" if state.install_erpnext else "Frappe"
        branch = ctx.config.frappe_branch
        if ssl_in_place(state):
            lines = [
                f"Congratulations! You have successfully installed {product} ({branch}) with SSL.",
                f"You can access your instance securely at {access_url(state)}",
            ]
        else:
            lines = [
                f"Congratulations! You have successfully installed {product} ({branch}).",
                f"You can access your instance at {access_url(state)}",
            ]
        lines.append(f"Visit {DOCS_URL} for documentation.")

        ctx.console.print(Panel("\n".join(lines), border_style="green"))
        logger.info("Provisioning complete: %s", access_url(state))
        return state

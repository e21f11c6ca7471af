from __future__ import annotations

import logging
from typing import Optional

from ..lib.pkg import apt_install
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

CERTBOT_SNAP_BIN = "/snap/bin/certbot"
CERTBOT_BIN = "/usr/bin/certbot"


def certificate_path(site: str) -> str:
    return f"/etc/letsencrypt/live/{site}/fullchain.pem"


class InstallTlsCertificateStep(BaseStep):
    step_id = "85_ssl"
    description = "Optionally obtain a TLS certificate with certbot"

    def prepare(self, ctx: ProvisionContext, state: RunState) -> RunState:
        if state.install_ssl is None:
            state.install_ssl = ctx.prompter.ask_yes_no("Would you like to install SSL?")
        return state

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        if not state.install_ssl:
            return "SSL installation declined"
        if ctx.host.path_exists(certificate_path(str(state.site_name)), sudo=True):
            return f"a certificate for {state.site_name} is already installed"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        host = ctx.host
        site = str(state.site_name)

        logger.info("Installing certbot")
        apt_install(host, ["snapd"])
        host.run(["snap", "install", "core"], sudo=True)
        host.run(["snap", "refresh", "core"], sudo=True)
        host.run(["snap", "install", "--classic", "certbot"], sudo=True)
        if not host.path_exists(CERTBOT_BIN):
            host.run(["ln", "-s", CERTBOT_SNAP_BIN, CERTBOT_BIN], sudo=True)

        if not state.ssl_email:
            state.ssl_email = ctx.prompter.ask_text("Enter your email address for SSL certificate")
        ctx.prompter.wait_for_enter(
            f"Ensure {site} is pointed to this server's IP address before proceeding."
        )

        logger.info("Obtaining and installing a certificate for %s", site)
        host.run(
            [
                "certbot",
                "--nginx",
                "--non-interactive",
                "--agree-tos",
                "--email",
                state.ssl_email,
                "-d",
                site,
            ],
            sudo=True,
            capture=False,
        )
        ctx.pace()
        return state

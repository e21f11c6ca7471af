from __future__ import annotations

import logging
from typing import Optional

from ..errors import ProvisionError
from ..lib.pkg import apt_install
from ..lib.runtimes import nvm_node_bin_dir, nvm_shell
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

NVM_INSTALLER_URL = "https://raw.githubusercontent.com/nvm-sh/nvm/{version}/install.sh"


def _activate(ctx: ProvisionContext, state: RunState, bin_dir: str) -> None:
    state.node_bin_dir = bin_dir
    if bin_dir not in ctx.host.extra_path:
        ctx.host.extra_path.insert(0, bin_dir)


class InstallNodeToolchainStep(BaseStep):
    step_id = "55_node"
    description = "Install nvm, Node.js, npm and yarn"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        major = ctx.config.node_major
        bin_dir = nvm_node_bin_dir(ctx.host, major)
        if bin_dir is None or not ctx.host.command_exists("yarn"):
            return None
        # Later steps still need node on PATH even when nothing is installed.
        _activate(ctx, state, bin_dir)
        return f"Node.js {major} via nvm and yarn are already installed"

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        cfg = ctx.config
        host = ctx.host
        major = cfg.node_major

        url = NVM_INSTALLER_URL.format(version=cfg.nvm_version)
        host.run(["bash", "-c", f"set -o pipefail; curl -fsSL -o- {url} | bash"])

        logger.info("Installing Node.js version %d", major)
        host.run(
            ["bash", "-c", nvm_shell(host, f"nvm install {major} && nvm use {major} && nvm alias default {major}")]
        )

        bin_dir = nvm_node_bin_dir(host, major)
        if bin_dir is None:
            if not host.dry_run:
                raise ProvisionError(f"nvm did not provide Node.js {major}")
        else:
            _activate(ctx, state, bin_dir)

        apt_install(host, ["npm"])
        host.run(["npm", "install", "-g", "yarn"], sudo=True)
        logger.info("NVM, Node.js, npm and yarn installed")
        ctx.pace()
        return state

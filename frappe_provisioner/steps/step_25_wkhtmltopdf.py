from __future__ import annotations

import logging
from typing import Optional

from ..lib.hwdetect import artifact_arch
from ..lib.pkg import apt_fix_broken, apt_install, dpkg_install
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

RELEASES_URL = "https://github.com/wkhtmltopdf/packaging/releases/download"
BINARIES = ["wkhtmltopdf", "wkhtmltoimage"]
FONT_PACKAGES = ["fontconfig", "xvfb", "libfontconfig", "xfonts-base", "xfonts-75dpi", "libxrender1"]


def artifact_name(release: str, distro: str, arch: str) -> str:
    return f"wkhtmltox_{release}.{distro}_{arch}.deb"


def artifact_url(release: str, distro: str, arch: str) -> str:
    return f"{RELEASES_URL}/{release}/{artifact_name(release, distro, arch)}"


class InstallWkhtmltopdfStep(BaseStep):
    step_id = "25_wkhtmltopdf"
    description = "Install the pinned wkhtmltopdf build"

    def prepare(self, ctx: ProvisionContext, state: RunState) -> RunState:
        # Unsupported architectures stop the run here, before any download.
        machine = state.machine or ctx.host.machine()
        state.machine = machine
        state.artifact_arch = artifact_arch(machine)
        return state

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        out = ctx.host.output(["/usr/bin/wkhtmltopdf", "--version"])
        upstream = ctx.config.wkhtmltopdf_release.split("-")[0]
        if out and upstream in out:
            return f"wkhtmltopdf {upstream} is already installed"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        cfg = ctx.config
        arch = state.artifact_arch or artifact_arch(ctx.host.machine())
        url = artifact_url(cfg.wkhtmltopdf_release, cfg.wkhtmltopdf_distro, arch)
        deb = f"/tmp/{artifact_name(cfg.wkhtmltopdf_release, cfg.wkhtmltopdf_distro, arch)}"

        host = ctx.host
        host.run(["wget", "-q", url, "-O", deb])
        if not dpkg_install(host, deb, check=False):
            logger.info("dpkg reported unmet dependencies for %s; apt will repair them", deb)
        host.run(["cp", *[f"/usr/local/bin/{b}" for b in BINARIES], "/usr/bin/"], sudo=True)
        host.run(["chmod", "a+x", *[f"/usr/bin/{b}" for b in BINARIES]], sudo=True)
        host.run(["rm", "-f", deb], sudo=True)
        apt_fix_broken(host)
        apt_install(host, FONT_PACKAGES)
        logger.info("wkhtmltopdf %s (%s) installed", cfg.wkhtmltopdf_release, arch)
        ctx.pace()
        return state

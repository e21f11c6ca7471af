from __future__ import annotations

import logging
from typing import Optional

from ..lib.pkg import apt_install
from ..lib.runtimes import python3_version, version_at_least
from ..pipeline import ProvisionContext
from ..state import RunState
from .base import BaseStep

logger = logging.getLogger(__name__)

BUILD_DEPENDENCIES = [
    "build-essential",
    "zlib1g-dev",
    "libncurses5-dev",
    "libgdbm-dev",
    "libnss3-dev",
    "libssl-dev",
    "libreadline-dev",
    "libffi-dev",
    "libsqlite3-dev",
    "wget",
    "libbz2-dev",
]


class EnsurePythonStep(BaseStep):
    step_id = "50_python"
    description = "Ensure a recent enough Python 3"

    def precondition(self, ctx: ProvisionContext, state: RunState) -> Optional[str]:
        state.python_version = python3_version(ctx.host)
        minimum = ctx.config.python_min_version
        if version_at_least(state.python_version, minimum):
            return f"Python {state.python_version} satisfies >= {minimum}"
        return None

    def apply(self, ctx: ProvisionContext, state: RunState) -> RunState:
        cfg = ctx.config
        host = ctx.host
        version = cfg.python_source_version
        short = ".".join(version.split(".")[:2])
        src = f"Python-{version}"
        tarball = f"{src}.tgz"
        build_root = host.home
        build_dir = str(build_root / src)

        logger.info("Building Python %s from source (found %s)", version, state.python_version or "none")
        apt_install(host, BUILD_DEPENDENCIES)

        host.run(["wget", f"https://www.python.org/ftp/python/{version}/{tarball}"], cwd=str(build_root))
        host.run(["tar", "-xf", tarball], cwd=str(build_root))
        host.run(["./configure", "--enable-optimizations", "--enable-shared"], cwd=build_dir, capture=False)
        jobs = host.output(["nproc"]) or "1"
        host.run(["make", "-j", jobs], cwd=build_dir, capture=False)
        # altinstall leaves the distribution's python3 untouched.
        host.run(["make", "altinstall"], sudo=True, cwd=build_dir, capture=False)
        host.run(["rm", "-rf", src, tarball], sudo=True, cwd=str(build_root))

        host.run(
            [
                "update-alternatives",
                "--install",
                "/usr/bin/python3",
                "python3",
                f"/usr/local/bin/python{short}",
                "1",
            ],
            sudo=True,
        )
        logger.info("Python %s installed", version)
        ctx.pace()
        return state

from __future__ import annotations

import getpass
import logging
import os
import platform
import time
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

Runner = Callable[..., CmdResult]

INSTALLED_STATUS = "install ok installed"


class Host:
    """The machine being provisioned.

    Steps never call subprocess directly: mutations go through ``run`` and
    idempotency checks go through the read-only probes below, so a test can
    swap the runner and script every answer the host gives.
    """

    def __init__(
        self,
        *,
        dry_run: bool = False,
        runner: Runner = run_cmd,
        is_root: Optional[bool] = None,
        home: Optional[Path] = None,
        user: Optional[str] = None,
    ) -> None:
        self.dry_run = dry_run
        self._runner = runner
        self.is_root = (os.geteuid() == 0) if is_root is None else is_root
        self.home = home or Path.home()
        self.user = user or getpass.getuser()
        # Extra PATH entries made available to later commands (e.g. nvm's node).
        self.extra_path: List[str] = []

    def _env(self, env: Optional[Mapping[str, str]]) -> Optional[dict]:
        if not self.extra_path:
            return dict(env) if env else None
        merged = dict(env or {})
        merged["PATH"] = os.pathsep.join([*self.extra_path, os.environ.get("PATH", "")])
        return merged

    def run(
        self,
        argv: Sequence[str],
        *,
        sudo: bool = False,
        check: bool = True,
        cwd: Optional[str] = None,
        input_text: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        capture: bool = True,
        secrets: Sequence[str] = (),
        read_only: bool = False,
    ) -> CmdResult:
        full = list(argv)
        if sudo and not self.is_root:
            full = ["sudo", *full]
        return self._runner(
            full,
            check=check,
            env=self._env(env),
            cwd=cwd,
            input_text=input_text,
            capture=capture,
            secrets=secrets,
            dry_run=self.dry_run and not read_only,
        )

    # Probes: read-only, never raise on non-zero exit.

    def succeeds(self, argv: Sequence[str], *, sudo: bool = False, secrets: Sequence[str] = ()) -> bool:
        return self.run(argv, sudo=sudo, check=False, secrets=secrets, read_only=True).ok

    def output(self, argv: Sequence[str], *, sudo: bool = False, secrets: Sequence[str] = ()) -> Optional[str]:
        r = self.run(argv, sudo=sudo, check=False, secrets=secrets, read_only=True)
        if not r.ok:
            return None
        return r.stdout.strip()

    def user_exists(self, name: str) -> bool:
        return self.succeeds(["id", name])

    def package_installed(self, package: str) -> bool:
        # dpkg -s also succeeds for removed-but-not-purged ("rc") packages.
        status = self.output(["dpkg-query", "-W", "-f=${Status}", package])
        return status == INSTALLED_STATUS

    def command_exists(self, name: str) -> bool:
        return self.succeeds(["which", name])

    def path_exists(self, path: str, *, sudo: bool = False) -> bool:
        return self.succeeds(["test", "-e", path], sudo=sudo)

    def file_has_line(self, path: str, line: str, *, sudo: bool = False) -> bool:
        return self.succeeds(["grep", "-qxF", line, path], sudo=sudo)

    def read_file(self, path: str, *, sudo: bool = False) -> Optional[str]:
        r = self.run(["cat", path], sudo=sudo, check=False, read_only=True)
        return r.stdout if r.ok else None

    # Mutations.

    def write_file(self, path: str, contents: str, *, mode: Optional[str] = None) -> None:
        """Write a root-owned file through ``tee`` and optionally chmod it."""
        self.run(["tee", path], sudo=True, input_text=contents)
        if mode:
            self.run(["chmod", mode, path], sudo=True)

    def machine(self) -> str:
        return platform.machine()

    def sleep(self, seconds: float) -> None:
        if self.dry_run or seconds <= 0:
            return
        time.sleep(seconds)

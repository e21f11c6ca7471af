from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)

REDACTED = "***"


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _redact(text: str, secrets: Sequence[str]) -> str:
    for s in secrets:
        if s:
            text = text.replace(s, REDACTED)
    return text


def fmt_argv(argv: Sequence[str], secrets: Sequence[str] = ()) -> str:
    return " ".join(shlex.quote(_redact(a, secrets)) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    capture: bool = True,
    secrets: Sequence[str] = (),
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command, with any ``secrets`` masked.
    - capture=False lets the child write straight to the terminal (long builds,
      tools that print progress).
    - dry_run logs but does not execute.
    - check=True raises CommandError carrying the child's exit code.
    """

    argv_list = list(argv)
    shown = fmt_argv(argv_list, secrets)
    logger.info("CMD %s", shown)

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    pipe = subprocess.PIPE if capture else None
    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        stdout=pipe,
        stderr=pipe,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
    )
    stdout = p.stdout or ""
    stderr = p.stderr or ""

    if stdout:
        logger.debug("STDOUT %s", _redact(stdout.strip(), secrets))
    if stderr:
        logger.debug("STDERR %s", _redact(stderr.strip(), secrets))

    if check and p.returncode != 0:
        raise CommandError(shown, p.returncode, _redact(stderr, secrets))

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)

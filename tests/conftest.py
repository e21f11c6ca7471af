"""
Shared test fixtures: a scripted command runner, a fake host and a scripted
operator, so steps can be exercised without touching a real machine.
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest
from rich.console import Console

from frappe_provisioner.config import ProvisionConfig
from frappe_provisioner.errors import CommandError
from frappe_provisioner.lib.command import CmdResult
from frappe_provisioner.lib.host import INSTALLED_STATUS, Host
from frappe_provisioner.pipeline import ProvisionContext
from frappe_provisioner.prompts import Prompter
from frappe_provisioner.state import RunState


@dataclass
class Call:
    argv: List[str]
    cwd: Optional[str]
    input_text: Optional[str]
    dry_run: bool

    @property
    def bare(self) -> List[str]:
        return self.argv[1:] if self.argv[:1] == ["sudo"] else self.argv

    @property
    def sudo(self) -> bool:
        return self.argv[:1] == ["sudo"]


class FakeRunner:
    """Stands in for run_cmd.

    Rules match on an argv prefix (ignoring a leading ``sudo``); the most
    recently added rule wins. A rule with several responses hands them out in
    order and then repeats the last one. Unmatched commands succeed silently,
    and every package reports as installed until a test says otherwise.
    """

    def __init__(self) -> None:
        self.calls: List[Call] = []
        self._rules: List[Tuple[Tuple[str, ...], List[Tuple[int, str, str]]]] = []
        self.on("dpkg-query", stdout=INSTALLED_STATUS)

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> "FakeRunner":
        return self.on_sequence(prefix, [(returncode, stdout, stderr)])

    def on_sequence(self, prefix: Sequence[str], responses: List[Tuple[int, str, str]]) -> "FakeRunner":
        self._rules.insert(0, (tuple(prefix), list(responses)))
        return self

    def fail(self, *prefix: str, returncode: int = 1) -> "FakeRunner":
        return self.on(*prefix, returncode=returncode)

    def __call__(
        self,
        argv,
        *,
        check=True,
        env=None,
        cwd=None,
        input_text=None,
        capture=True,
        secrets=(),
        dry_run=False,
    ) -> CmdResult:
        call = Call(argv=list(argv), cwd=cwd, input_text=input_text, dry_run=dry_run)
        self.calls.append(call)
        if dry_run:
            return CmdResult(argv=call.argv, returncode=0, stdout="", stderr="")

        rc, out, err = 0, "", ""
        for prefix, responses in self._rules:
            if tuple(call.bare[: len(prefix)]) == prefix:
                rc, out, err = responses[0]
                if len(responses) > 1:
                    responses.pop(0)
                break

        if check and rc != 0:
            raise CommandError(" ".join(call.argv), rc, err)
        return CmdResult(argv=call.argv, returncode=rc, stdout=out, stderr=err)

    # assertions helpers

    def commands(self) -> List[List[str]]:
        return [c.bare for c in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(c.bare[: len(prefix)]) == prefix for c in self.calls)

    def index_of(self, *prefix: str) -> int:
        for i, c in enumerate(self.calls):
            if tuple(c.bare[: len(prefix)]) == prefix:
                return i
        raise AssertionError(f"{prefix} was never run")

    def calls_to(self, *prefix: str) -> List[Call]:
        return [c for c in self.calls if tuple(c.bare[: len(prefix)]) == prefix]


class FakeHost(Host):
    def __init__(self, runner: FakeRunner, home: Path, *, machine: str = "x86_64", dry_run: bool = False) -> None:
        super().__init__(dry_run=dry_run, runner=runner, is_root=False, home=home, user="erp")
        self.machine_name = machine
        self.sleeps: List[float] = []

    def machine(self) -> str:
        return self.machine_name

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self.sleeps.append(seconds)


class ScriptedAsk:
    """Answers prompts from a fixed script and records what was asked."""

    def __init__(self) -> None:
        self.answers: List[str] = []
        self.asked: List[Tuple[str, bool]] = []

    def extend(self, answers: Sequence[str]) -> None:
        self.answers.extend(answers)

    def __call__(self, prompt, *, console=None, password=False):
        self.asked.append((prompt, password))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt}")
        return self.answers.pop(0)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    return tmp_path / "home" / "erp"


@pytest.fixture
def host(runner: FakeRunner, home: Path) -> FakeHost:
    return FakeHost(runner, home)


@pytest.fixture
def answers() -> ScriptedAsk:
    return ScriptedAsk()


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def config() -> ProvisionConfig:
    return ProvisionConfig(raw={"run": {"pacing_seconds": 0}})


@pytest.fixture
def ctx(config: ProvisionConfig, host: FakeHost, answers: ScriptedAsk, console: Console) -> ProvisionContext:
    return ProvisionContext(
        config=config,
        host=host,
        prompter=Prompter(console=console, ask=answers),
        console=console,
    )


@pytest.fixture
def state() -> RunState:
    return RunState(
        db_root_password="s3cr'et",
        os_name="Ubuntu",
        os_version="22.04",
        os_codename="jammy",
        machine="x86_64",
    )

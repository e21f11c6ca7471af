from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from rich.console import Console

from .config import ProvisionConfig, load_config
from .errors import ProvisionError
from .lib.host import Host
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, ProvisionContext, Step, run_pipeline
from .preflight import run_preflight
from .prompts import Prompter
from .run_report import save_report
from .state import RunState, StepOutcome
from .steps import (
    ApplyWorkspacePermissionsStep,
    ConfigureMariaDBStep,
    CreateSiteStep,
    EnsurePythonStep,
    EnsureServiceUserStep,
    GrantSudoersStep,
    InitBenchStep,
    InstallBenchCliStep,
    InstallErpnextStep,
    InstallMariaDBStep,
    InstallNodeToolchainStep,
    InstallPrerequisitesStep,
    InstallTlsCertificateStep,
    InstallWkhtmltopdfStep,
    PrintSummaryStep,
    RemoveMismatchedMariaDBStep,
    SecureMariaDBStep,
    SetupProductionStep,
    UpgradeSystemStep,
)
from .steps.step_45_secure_mariadb import collect_db_root_password

logger = logging.getLogger(__name__)

PREFLIGHT_ID = "00_preflight"


def build_steps() -> List[Step]:
    return [
        EnsureServiceUserStep(),
        GrantSudoersStep(),
        UpgradeSystemStep(),
        InstallPrerequisitesStep(),
        InstallWkhtmltopdfStep(),
        RemoveMismatchedMariaDBStep(),
        InstallMariaDBStep(),
        ConfigureMariaDBStep(),
        SecureMariaDBStep(),
        EnsurePythonStep(),
        InstallNodeToolchainStep(),
        InstallBenchCliStep(),
        InitBenchStep(),
        CreateSiteStep(),
        InstallErpnextStep(),
        SetupProductionStep(),
        InstallTlsCertificateStep(),
        ApplyWorkspacePermissionsStep(),
        PrintSummaryStep(),
    ]


def provision(
    ctx: ProvisionContext,
    *,
    state: Optional[RunState] = None,
    steps: Optional[List[Step]] = None,
) -> PipelineResult:
    """Preflight, collect the database secret, then run every step in order."""

    state = state or RunState()
    try:
        state = run_preflight(ctx, state)
    except ProvisionError as e:
        logger.error("Preflight failed: %s", e)
        state.outcomes.append(StepOutcome.failed(PREFLIGHT_ID, str(e), e.exit_code))
        return PipelineResult(state=state, outcomes=list(state.outcomes))

    ctx.console.print("[bold blue]Welcome to the Frappe quick install.[/]")
    ctx.pace()
    state = collect_db_root_password(ctx, state)

    return run_pipeline(ctx=ctx, state=state, steps=steps if steps is not None else build_steps())


def exit_code_for(result: PipelineResult) -> int:
    failed = result.failed
    if failed is None:
        return 0
    code = failed.exit_code
    # Signal deaths come back negative from subprocess.
    if code < 0:
        return 128 + abs(code)
    return code or 1


def run(
    *,
    config: Optional[ProvisionConfig] = None,
    log_path: str = DEFAULT_LOG_PATH,
    report_path: Optional[str] = None,
    dry_run: bool = False,
    console: Optional[Console] = None,
) -> int:
    console = console or Console()
    configure_logging(log_path=log_path, console=console)

    ctx = ProvisionContext(
        config=config or ProvisionConfig(),
        host=Host(dry_run=dry_run),
        prompter=Prompter(console=console),
        console=console,
    )

    state = RunState()
    result: Optional[PipelineResult] = None
    try:
        result = provision(ctx, state=state)
    except KeyboardInterrupt:
        logger.error("Interrupted; the host is left as the last completed step made it")
        return 130
    except Exception:
        logger.exception("Provisioner failed")
        return 1
    finally:
        if report_path:
            # Partial runs still report the steps that finished.
            save_report(report_path, result or PipelineResult(state=state, outcomes=list(state.outcomes)))

    code = exit_code_for(result)
    if code:
        failed = result.failed
        console.print(
            f"[red]Error: step {failed.step_id} failed with exit code {code}: {failed.reason}[/]"
        )
    return code


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="frappe-provisioner")
    p.add_argument("--config", default=None, help="YAML file overriding pins and paths")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to provisioner log")
    p.add_argument("--report", default=None, help="Write a run report (json|yaml) without secrets")
    p.add_argument("--dry-run", action="store_true", help="Log mutating commands without running them")

    args = p.parse_args(argv)

    return run(
        config=load_config(args.config),
        log_path=args.log,
        report_path=args.report,
        dry_run=bool(args.dry_run),
    )


if __name__ == "__main__":
    raise SystemExit(main())

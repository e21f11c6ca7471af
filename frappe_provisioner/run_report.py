from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .pipeline import PipelineResult

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def build_report(result: PipelineResult) -> Dict[str, Any]:
    report = result.state.to_report()
    interrupted_at = result.state.current_step
    report["summary"] = {
        "ok": result.ok and interrupted_at is None,
        "interrupted_at": interrupted_at,
        "ran_steps": result.ran_steps,
        "skipped_steps": result.skipped_steps,
        "failed_step": result.failed.step_id if result.failed else None,
    }
    return report


def save_report(path: str, result: PipelineResult) -> None:
    """Write what the run did, secrets redacted. Never read back."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    report = build_report(result)

    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(report, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Run report written to %s", p)

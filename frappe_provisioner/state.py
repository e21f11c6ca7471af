from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

_SECRET_FIELDS = ("db_root_password", "admin_password")


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepOutcome:
    step_id: str
    status: StepStatus
    reason: str = ""
    exit_code: int = 0

    @classmethod
    def succeeded(cls, step_id: str) -> "StepOutcome":
        return cls(step_id=step_id, status=StepStatus.SUCCEEDED)

    @classmethod
    def skipped(cls, step_id: str, reason: str) -> "StepOutcome":
        return cls(step_id=step_id, status=StepStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, step_id: str, reason: str, exit_code: int = 1) -> "StepOutcome":
        return cls(step_id=step_id, status=StepStatus.FAILED, reason=reason, exit_code=exit_code)


@dataclass
class RunState:
    """Everything one run learns and decides; discarded at exit."""

    # secrets
    db_root_password: Optional[str] = None
    admin_password: Optional[str] = None

    # operator input
    site_name: Optional[str] = None
    ssl_email: Optional[str] = None
    install_erpnext: Optional[bool] = None
    install_ssl: Optional[bool] = None

    # host facts
    os_name: Optional[str] = None
    os_version: Optional[str] = None
    os_codename: Optional[str] = None
    machine: Optional[str] = None
    artifact_arch: Optional[str] = None
    mariadb_version: Optional[str] = None
    python_version: Optional[str] = None
    node_bin_dir: Optional[str] = None
    server_ip: Optional[str] = None

    # execution
    current_step: Optional[str] = None
    outcomes: List[StepOutcome] = field(default_factory=list)

    def outcome_for(self, step_id: str) -> Optional[StepOutcome]:
        for o in self.outcomes:
            if o.step_id == step_id:
                return o
        return None

    def to_report(self) -> Dict[str, Any]:
        """Serializable view with secrets redacted."""

        data: Dict[str, Any] = {}
        for k, v in self.__dict__.items():
            if k == "outcomes":
                continue
            if k in _SECRET_FIELDS:
                data[k] = "***" if v else None
            else:
                data[k] = v
        data["outcomes"] = [
            {"step": o.step_id, "status": o.status.value, "reason": o.reason, "exit_code": o.exit_code}
            for o in self.outcomes
        ]
        return data

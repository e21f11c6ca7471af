from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_PREREQUISITES = [
    "software-properties-common",
    "git",
    "curl",
    "wget",
    "gnupg",
    "build-essential",
    "zlib1g-dev",
    "libncurses5-dev",
    "libgdbm-dev",
    "libnss3-dev",
    "libssl-dev",
    "libreadline-dev",
    "libffi-dev",
    "libsqlite3-dev",
    "libbz2-dev",
    "python3-dev",
    "python3-venv",
    "python3-pip",
    "redis-server",
    "mariadb-server",
    "mariadb-client",
    "snapd",
    "fontconfig",
    "libxrender1",
    "xfonts-75dpi",
    "xfonts-base",
]


@dataclass(frozen=True)
class ProvisionConfig:
    """Pins and paths, each overridable from a YAML mapping."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    def _quoted(self, section: str, key: str, default: str) -> str:
        # Unquoted YAML turns 10.10 into the float 10.1 and 0755 into 493.
        v = self._section(section).get(key)
        if v is None:
            return default
        if not isinstance(v, str):
            raise ValueError(f"{section}.{key} must be a quoted string, got {v!r}")
        return v

    # host

    @property
    def supported_distributor(self) -> str:
        return str(self._section("host").get("distributor") or "Ubuntu")

    @property
    def supported_versions(self) -> List[str]:
        versions = self._section("host").get("supported_versions")
        if versions is None:
            return ["22.04", "24.04"]
        bad = [v for v in versions if not isinstance(v, str)]
        if bad:
            raise ValueError(f"host.supported_versions entries must be quoted strings, got {bad!r}")
        return list(versions)

    @property
    def service_user(self) -> str:
        return str(self._section("host").get("service_user") or "frappe")

    @property
    def prerequisites(self) -> List[str]:
        return list(self._section("host").get("prerequisites") or DEFAULT_PREREQUISITES)

    # mariadb

    @property
    def mariadb_version(self) -> str:
        return self._quoted("mariadb", "version", "10.6")

    @property
    def mariadb_key_url(self) -> str:
        return str(
            self._section("mariadb").get("key_url") or "https://mariadb.org/mariadb_release_signing_key.asc"
        )

    @property
    def mariadb_repo_url(self) -> str:
        base = self._section("mariadb").get("repo_base") or "https://mariadb.org/mariadb/repositories"
        return f"{str(base).rstrip('/')}/{self.mariadb_version}/ubuntu"

    @property
    def mariadb_config_path(self) -> str:
        return str(
            self._section("mariadb").get("config_path") or "/etc/mysql/mariadb.conf.d/50-server.cnf"
        )

    @property
    def password_max_attempts(self) -> int:
        v = self._section("mariadb").get("password_max_attempts")
        attempts = 30 if v is None else int(v)
        if attempts < 1:
            raise ValueError(f"mariadb.password_max_attempts must be at least 1, got {attempts}")
        return attempts

    @property
    def password_retry_delay(self) -> float:
        v = self._section("mariadb").get("password_retry_delay")
        return float(2 if v is None else v)

    # runtimes

    @property
    def python_min_version(self) -> str:
        return self._quoted("python", "min_version", "3.10")

    @property
    def python_source_version(self) -> str:
        return self._quoted("python", "source_version", "3.10.11")

    @property
    def nvm_version(self) -> str:
        return str(self._section("node").get("nvm_version") or "v0.39.5")

    @property
    def node_major(self) -> int:
        v = self._section("node").get("major")
        return 18 if v is None else int(v)

    # wkhtmltopdf

    @property
    def wkhtmltopdf_release(self) -> str:
        return str(self._section("wkhtmltopdf").get("release") or "0.12.6.1-2")

    @property
    def wkhtmltopdf_distro(self) -> str:
        return str(self._section("wkhtmltopdf").get("distro") or "jammy")

    # frappe

    @property
    def frappe_branch(self) -> str:
        return str(self._section("frappe").get("branch") or "version-15")

    @property
    def bench_dir(self) -> str:
        return str(self._section("frappe").get("bench_dir") or "frappe-bench")

    @property
    def erpnext_branch(self) -> str:
        return str(self._section("frappe").get("erpnext_branch") or self.frappe_branch)

    @property
    def workspace_mode(self) -> str:
        return self._quoted("frappe", "workspace_mode", "755")

    # run

    @property
    def pacing_seconds(self) -> float:
        v = self._section("run").get("pacing_seconds")
        return float(2 if v is None else v)

    def validate(self) -> "ProvisionConfig":
        """Read every setting once so bad values fail at load time."""

        for name, attr in vars(type(self)).items():
            if isinstance(attr, property):
                getattr(self, name)
        return self


def load_config(path: Optional[str]) -> ProvisionConfig:
    if path is None:
        return ProvisionConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("provisioner config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("provisioner config must contain a mapping/object")

    return ProvisionConfig(raw=raw).validate()

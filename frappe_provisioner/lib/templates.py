from __future__ import annotations

from pathlib import Path
from string import Template


def _templates_dir() -> Path:
    # frappe_provisioner/lib/templates.py -> frappe_provisioner/templates
    return Path(__file__).resolve().parents[1] / "templates"


def render_template(name: str, **values: str) -> str:
    """Render a packaged ``$placeholder`` template."""

    p = _templates_dir() / name.lstrip("/")
    return Template(p.read_text(encoding="utf-8")).substitute(**values)

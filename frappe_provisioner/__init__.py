"""Frappe host provisioner (Python-first, idempotent).

Core design goals:
- Every step checks live host state before changing it
- Safe to re-run from scratch after any failure
- Pinned versions verified after install
- Centralized logging with secrets masked
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

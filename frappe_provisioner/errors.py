"""
Error classes for the provisioner.

Steps raise these to signal failure. The pipeline catches ProvisionError at
the step boundary, records a failed outcome carrying ``exit_code`` and stops
the run. Anything else is a bug and propagates.
"""

from __future__ import annotations


class ProvisionError(Exception):
    """Base exception: a step cannot establish its target condition."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class UnsupportedEnvironmentError(ProvisionError):
    """Host OS, release or CPU architecture is not supported."""


class VersionMismatchError(ProvisionError):
    """A pinned version was not reached after installing it."""


class RetryExhaustedError(ProvisionError):
    """A bounded retry loop gave up."""


class CommandError(ProvisionError):
    """An external command exited non-zero.

    The exit code is propagated unchanged as the process exit code.
    """

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        msg = f"Command failed ({returncode}): {command}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg, exit_code=returncode)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_PATH = "/var/log/frappe-provisioner.log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
    console: Optional[Console] = None,
) -> str:
    """Configure logging.

    Every command and decision goes to the log file at DEBUG; the console gets
    INFO and above through rich.

    Notes:
    - The provisioner normally runs as an unprivileged sudoer, so /var/log
      is often not writable. We still *attempt* it first and fall back to a
      file in the working directory.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(min(level, logging.DEBUG))

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_frappe_provisioner_configured", False):
        return getattr(logger, "_frappe_provisioner_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.FileHandler(log_path)
    except OSError:
        fallback = str(Path.cwd() / "frappe-provisioner.log")
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        rich_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        rich_handler.setLevel(level)
        handlers.append(rich_handler)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_frappe_provisioner_configured", True)
    setattr(logger, "_frappe_provisioner_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path

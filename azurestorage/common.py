"""Shared utilities — stderr console output and logging setup.

Standard output is reserved for the single result line of an operation, so
every diagnostic goes through the stderr console defined here.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

# ---------------------------------------------------------------------------
# Console singleton
# ---------------------------------------------------------------------------
console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Timestamp for log file naming
# ---------------------------------------------------------------------------
TIMESTAMP = datetime.now().strftime("%Y-%m-%d-%H%M%S")

# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def print_error(msg: str) -> None:
    console.print(f"[bold red]✖ {escape(msg)}[/bold red]")


def die(msg: str, code: int = 1) -> None:
    print_error(msg)
    sys.exit(code)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

_log_file: Optional[Path] = None


def init_logging(
    prefix: str = "azurestorage",
    log_dir: Optional[Path] = None,
    verbose: bool = False,
) -> Optional[Path]:
    """Attach handlers to the package logger. Returns the log file path, if any."""
    global _log_file

    logger = logging.getLogger("azurestorage")
    logger.setLevel(logging.DEBUG)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        _log_file = log_dir / f"{prefix}-{TIMESTAMP}.log"
        fh = logging.FileHandler(_log_file)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(fh)

    if verbose:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(logging.DEBUG)
        sh.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(sh)

    return _log_file
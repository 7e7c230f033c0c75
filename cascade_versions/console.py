"""Console output helpers.

Step headers and fatal errors for the reconcile run, plus GitHub Actions
step output writing.
"""

from __future__ import annotations

import sys
from typing import NoReturn


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of a reconcile run in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> NoReturn:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should abort the whole run.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


def write_github_output(output_path: str, name: str, value: str) -> None:
    """Append a ``name=value`` line to a GitHub Actions output file."""
    with open(output_path, "a") as fh:
        fh.write(f"{name}={value}\n")

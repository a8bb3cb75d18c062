"""Central exit-code table for rtx doctor."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes used by the doctor command."""

    SUCCESS = 0
    PROBLEMS_FOUND = 1
    # Alias of PROBLEMS_FOUND: fatal errors also exit 1, so ExitCode(1).name
    # is always PROBLEMS_FOUND. Callers tell the two apart by whether a
    # report was printed.
    FATAL = 1

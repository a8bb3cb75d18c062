"""rtx_doctor: self-diagnostics for the rtx runtime version manager."""

from __future__ import annotations

__version__ = "1.0.0"

from rtx_doctor.checks import CHECKS, CheckContext, Outcome, run_checks  # noqa: E402
from rtx_doctor.doctor import Doctor  # noqa: E402
from rtx_doctor.env import EnvSnapshot  # noqa: E402
from rtx_doctor.lookup import Lookup  # noqa: E402
from rtx_doctor.report import DiagnosticReport, Problem  # noqa: E402

__all__ = [
    "CHECKS",
    "CheckContext",
    "DiagnosticReport",
    "Doctor",
    "EnvSnapshot",
    "Lookup",
    "Outcome",
    "Problem",
    "run_checks",
]

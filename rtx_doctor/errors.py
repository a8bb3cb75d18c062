"""rtx doctor error hierarchy.

Only :class:`ConfigError` and :class:`ToolsetError` are fatal; every other
error is caught where it is raised and turned into a placeholder.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel

from rtx_doctor.exit_codes import ExitCode


class ErrorCategory(str, Enum):
    CONFIG = "config"
    TOOLSET = "toolset"
    GIT = "git"
    SHELL = "shell"


class Suggestion(BaseModel):
    action: str
    fix: str
    example: str | None = None


class ToolError(Exception):
    """Base error carrying a code and an optional fix suggestion."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        suggestion: Suggestion | None = None,
        details: dict[str, Any] | None = None,
        exit_code: ExitCode | int = ExitCode.FATAL,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.suggestion = suggestion
        self.details = details or {}
        self.exit_code = int(exit_code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "category": self.category.value,
            "suggestion": self.suggestion.model_dump() if self.suggestion else None,
            "details": self.details,
        }


class ConfigError(ToolError):
    """E1xxx: a config file could not be read or parsed."""

    def __init__(
        self,
        message: str,
        code: str = "E1000",
        suggestion: Suggestion | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            category=ErrorCategory.CONFIG,
            suggestion=suggestion,
            details=details,
        )


class ToolsetError(ToolError):
    """E2xxx: the toolset could not be resolved."""

    def __init__(
        self,
        message: str,
        code: str = "E2000",
        suggestion: Suggestion | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            category=ErrorCategory.TOOLSET,
            suggestion=suggestion,
            details=details,
        )


class GitError(ToolError):
    """E3xxx: a git metadata query failed."""

    def __init__(self, message: str, code: str = "E3000", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code, category=ErrorCategory.GIT, details=details)


class ShellProbeError(ToolError):
    """E4xxx: the shell binary could not report its version."""

    def __init__(self, message: str, code: str = "E4000", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code, category=ErrorCategory.SHELL, details=details)

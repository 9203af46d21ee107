"""Error types raised by the workspace hooks."""

from __future__ import annotations

from typing import Any, Optional


class HookError(Exception):
    """Base error for hook processing."""

    error_type = "hook_error"

    def __init__(self, message: str, file: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file = file

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        return result

    def __str__(self) -> str:
        if self.file:
            return f"{self.message} | file: {self.file}"
        return self.message


class MalformedInput(HookError):
    """Hook payload on stdin is not a usable event."""

    error_type = "malformed_input"


class ConfigError(HookError):
    """Error in hooks configuration."""

    error_type = "config_invalid"


class NotAGitRepository(HookError):
    """Working directory is not inside a git working tree."""

    error_type = "not_a_git_repository"

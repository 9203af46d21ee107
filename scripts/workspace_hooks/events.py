"""Hook event model and stdin payload parsing."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from scripts.workspace_hooks.errors import MalformedInput


class EventKind(str, Enum):
    """Lifecycle events handled by the hooks."""

    PRE_TOOL_USE = "PreToolUse"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    SESSION_START = "SessionStart"


# Events that resolve a workspace and therefore need a cwd
PROMPT_EVENTS = (EventKind.USER_PROMPT_SUBMIT, EventKind.SESSION_START)


@dataclass(frozen=True)
class HookEvent:
    """One decoded hook invocation."""

    event_kind: Union[EventKind, str]
    working_directory: Path
    tool_name: Optional[str] = None
    command_text: Optional[str] = None

    @property
    def event_name(self) -> str:
        """Event name as the host spells it."""
        if isinstance(self.event_kind, EventKind):
            return self.event_kind.value
        return self.event_kind

    @property
    def is_recognized(self) -> bool:
        return isinstance(self.event_kind, EventKind)


def _event_kind(name: str) -> Union[EventKind, str]:
    try:
        return EventKind(name)
    except ValueError:
        return name


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def parse_event(text: str, default_cwd: Optional[Path] = None) -> HookEvent:
    """
    Decode one hook payload.

    The event kind comes from ``hook_event_name``; a payload carrying only
    ``tool_name`` is treated as PreToolUse.

    Args:
        text: Raw stdin contents.
        default_cwd: Working directory used when the payload has no cwd
            and the event does not require one.

    Raises:
        MalformedInput: Empty or invalid JSON, a non-object payload, no
            discriminator, or a workspace event without a usable cwd.
    """
    if not text or not text.strip():
        raise MalformedInput("Empty hook input")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"Hook input is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise MalformedInput("Hook input must be a JSON object")

    event_name = data.get("hook_event_name")
    tool_name = _optional_str(data.get("tool_name"))
    if isinstance(event_name, str) and event_name:
        kind = _event_kind(event_name)
    elif tool_name:
        kind = EventKind.PRE_TOOL_USE
    else:
        raise MalformedInput("Hook input has neither hook_event_name nor tool_name")

    cwd = data.get("cwd")
    if isinstance(cwd, str) and cwd:
        working_directory = Path(cwd)
    elif kind in PROMPT_EVENTS:
        raise MalformedInput(f"{kind.value} hook input is missing cwd")
    else:
        working_directory = default_cwd if default_cwd is not None else Path.cwd()

    command_text = None
    if kind == EventKind.PRE_TOOL_USE:
        tool_input = data.get("tool_input")
        if isinstance(tool_input, dict):
            command_text = _optional_str(tool_input.get("command"))

    return HookEvent(
        event_kind=kind,
        working_directory=working_directory,
        tool_name=tool_name,
        command_text=command_text,
    )

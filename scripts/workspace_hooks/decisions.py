"""
Hook decisions and their wire encoding.

Exit codes:
  0 = Continue (optionally with additionalContext)
  2 = Block (the host stops and surfaces the reason)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scripts.workspace_hooks.hook_utils import BLOCK_EXIT_CODE


class Outcome(str, Enum):
    CONTINUE = "continue"
    BLOCK = "block"


@dataclass(frozen=True)
class Decision:
    """
    Result of handling one event.

    Usage:
        Decision.proceed(context="The assistant's workspace is at ...")
        Decision.block("Not in a git repository")
    """

    outcome: Outcome
    reason: Optional[str] = None
    additional_context: Optional[str] = None

    def __post_init__(self):
        if self.outcome == Outcome.BLOCK and not self.reason:
            raise ValueError("A blocking decision requires a reason")

    @classmethod
    def proceed(cls, context: Optional[str] = None) -> "Decision":
        return cls(Outcome.CONTINUE, additional_context=context or None)

    @classmethod
    def block(cls, reason: str, context: Optional[str] = None) -> "Decision":
        return cls(Outcome.BLOCK, reason=reason, additional_context=context)

    @property
    def blocked(self) -> bool:
        return self.outcome == Outcome.BLOCK


def encode(decision: Decision, event_name: str) -> tuple[str, int]:
    """
    Render a decision as (stdout text, exit code).

    PreToolUse blocks use the permissionDecision form; every other event
    blocks with the top-level decision/reason form.
    """
    if not decision.blocked:
        if not decision.additional_context:
            return "", 0
        payload = {
            "hookSpecificOutput": {
                "hookEventName": event_name,
                "additionalContext": decision.additional_context,
            }
        }
        return json.dumps(payload), 0

    if event_name == "PreToolUse":
        payload = {
            "hookSpecificOutput": {
                "hookEventName": "PreToolUse",
                "permissionDecision": "deny",
                "permissionDecisionReason": decision.reason,
            }
        }
    else:
        payload = {
            "decision": "block",
            "reason": decision.reason,
            "hookSpecificOutput": {
                "hookEventName": event_name,
                "additionalContext": decision.additional_context or decision.reason,
            },
        }
    return json.dumps(payload), BLOCK_EXIT_CODE

"""Prompt documents forwarded verbatim as hook context."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

DEFAULT_DOCUMENT = "default.md"


def find_prompt_document(
    prompt_dir: Path,
    event_name: str,
    repo_name: Optional[str] = None,
) -> Optional[Path]:
    """
    Locate the prompt document for an event.

    Checks <prompt_dir>/<event>/<repo>.md first, then
    <prompt_dir>/<event>/default.md.
    """
    event_dir = prompt_dir / event_name
    if repo_name:
        repo_specific = event_dir / f"{repo_name}.md"
        if repo_specific.is_file():
            return repo_specific

    default = event_dir / DEFAULT_DOCUMENT
    if default.is_file():
        return default
    return None


def read_prompt_document(path: Optional[Path]) -> str:
    """Read a prompt document; a missing file reads as empty, undecodable bytes as U+FFFD."""
    if path is None or not path.is_file():
        return ""
    return path.read_text(encoding="utf-8", errors="replace")

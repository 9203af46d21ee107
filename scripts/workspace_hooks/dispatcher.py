"""
Event routing: one event in, one Decision out.

All side effects (git queries, the signing probe, directory creation,
environment, home directory) come in through Capabilities so each path
can be exercised without real repositories or keys.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional

from scripts.workspace_hooks import gpg, workspace
from scripts.workspace_hooks.config import HooksConfig, expand_path
from scripts.workspace_hooks.decisions import Decision
from scripts.workspace_hooks.errors import NotAGitRepository
from scripts.workspace_hooks.events import EventKind, HookEvent, PROMPT_EVENTS
from scripts.workspace_hooks.git_context import GitContext, resolve_git_context
from scripts.workspace_hooks.prompts import find_prompt_document, read_prompt_document

logger = logging.getLogger(__name__)

NOT_A_GIT_REPOSITORY_REASON = "Not in a git repository"
WORKSPACE_CONTEXT = "The assistant's workspace is at {path}"


@dataclass
class Capabilities:
    """External effects available to the dispatcher."""

    git_context: Callable[[Path], GitContext] = resolve_git_context
    signing_ready: Callable[[str], bool] = gpg.probe_signing_ready
    make_dirs: Callable[[Path], None] = workspace.make_dirs
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    home: Path = field(default_factory=Path.home)


def check_git_command(event: HookEvent, caps: Capabilities, config: HooksConfig) -> Decision:
    """PreToolUse: block git commands while the signing key is locked."""
    command = event.command_text or ""
    if not gpg.is_git_command(command):
        return Decision.proceed()

    if not config.gpg.enabled:
        logger.debug("Signing gate disabled by configuration")
        return Decision.proceed()

    if caps.signing_ready(config.gpg.program):
        return Decision.proceed()

    return Decision.block(gpg.CREDENTIAL_LOCKED_REASON)


def prompt_document_text(
    event_name: str,
    repo_name: Optional[str],
    caps: Capabilities,
    config: HooksConfig,
) -> str:
    prompt_dir = expand_path(config.prompt_dir, caps.home)
    return read_prompt_document(find_prompt_document(prompt_dir, event_name, repo_name))


def setup_workspace(event: HookEvent, caps: Capabilities, config: HooksConfig) -> Decision:
    """UserPromptSubmit / SessionStart: resolve the branch workspace."""
    git_context = caps.git_context(event.working_directory)

    try:
        locator = workspace.resolve_workspace(
            git_context,
            caps.environ,
            caps.home,
            config.workspace,
            make_dirs=caps.make_dirs,
        )
    except NotAGitRepository:
        return Decision.block(NOT_A_GIT_REPOSITORY_REASON)
    except OSError as e:
        logger.warning(f"Could not create workspace directory: {e}")
        locator = None

    parts = []
    if locator is not None:
        if event.event_kind == EventKind.SESSION_START:
            logger.info(f"Workspace: {locator.branch_subdir} ({locator.source.value})")
        parts.append(WORKSPACE_CONTEXT.format(path=locator.branch_subdir))
    if config.prompt_documents:
        document = prompt_document_text(event.event_name, git_context.repo_name, caps, config)
        if document:
            parts.append(document)

    return Decision.proceed("\n\n".join(parts))


def inject_prompt_document(
    event: HookEvent,
    caps: Capabilities,
    config: HooksConfig,
    document: Optional[Path] = None,
) -> Decision:
    """
    Forward a prompt document as additional context.

    With an explicit ``document`` that file is used as-is; otherwise the
    repo-specific or default document for the event is looked up.
    Never blocks, also outside a git repository.
    """
    if document is not None:
        return Decision.proceed(read_prompt_document(document))

    repo_name = caps.git_context(event.working_directory).repo_name
    return Decision.proceed(prompt_document_text(event.event_name, repo_name, caps, config))


def dispatch(event: HookEvent, caps: Capabilities, config: HooksConfig) -> Decision:
    """Route an event to its handler; unknown events continue untouched."""
    if event.event_kind == EventKind.PRE_TOOL_USE:
        return check_git_command(event, caps, config)
    if event.event_kind in PROMPT_EVENTS:
        return setup_workspace(event, caps, config)

    logger.debug(f"Ignoring unrecognized event: {event.event_name}")
    return Decision.proceed()

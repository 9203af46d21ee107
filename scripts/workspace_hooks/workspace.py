"""
Per-branch workspace path resolution.

Every (repository, branch) pair maps to one scratch directory. The base
directory is picked by priority:

1. The override environment variable (CLAUDE_WORKSPACE by default)
2. A repository-local directory (<repo>/.claude/workspace), if it exists
3. <home>/.claude/workspace/<repo-name>

The branch name is appended as a subdirectory; a detached HEAD uses a
fixed placeholder so the path stays stable between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping

from scripts.workspace_hooks.config import WorkspaceConfig, expand_path
from scripts.workspace_hooks.errors import NotAGitRepository
from scripts.workspace_hooks.git_context import GitContext

logger = logging.getLogger(__name__)

DirMaker = Callable[[Path], None]


class WorkspaceSource(str, Enum):
    """Which priority rule selected the base directory."""

    ENVIRONMENT = "environment"
    REPO_LOCAL = "repo_local"
    DEFAULT = "default"


@dataclass(frozen=True)
class WorkspaceLocator:
    """Resolved workspace location."""

    base_dir: Path
    branch_subdir: Path
    source: WorkspaceSource


def make_dirs(path: Path) -> None:
    """Create ``path`` and its parents; existing directories are left alone."""
    path.mkdir(parents=True, exist_ok=True)


def branch_dir_name(git_context: GitContext, config: WorkspaceConfig) -> str:
    """Branch subdirectory name, or the detached placeholder."""
    if git_context.branch_name:
        return git_context.branch_name
    return config.detached_name


def resolve_base_dir(
    git_context: GitContext,
    environ: Mapping[str, str],
    home: Path,
    config: WorkspaceConfig,
) -> tuple[Path, WorkspaceSource]:
    """Pick the workspace base directory by priority."""
    repo_root = git_context.repo_root

    override = environ.get(config.env_var, "").strip()
    if override:
        base = expand_path(override, home)
        if not base.is_absolute():
            base = repo_root / base
        return base, WorkspaceSource.ENVIRONMENT

    repo_local = repo_root / config.repo_local_dir
    if repo_local.is_dir():
        return repo_local, WorkspaceSource.REPO_LOCAL

    default_root = expand_path(config.default_root, home)
    return default_root / git_context.repo_name, WorkspaceSource.DEFAULT


def resolve_workspace(
    git_context: GitContext,
    environ: Mapping[str, str],
    home: Path,
    config: WorkspaceConfig,
    make_dirs: DirMaker = make_dirs,
) -> WorkspaceLocator:
    """
    Resolve and create the workspace directory for ``git_context``.

    Args:
        git_context: Resolved git context; must be a worktree.
        environ: Environment mapping consulted for the override variable.
        home: The user's home directory.
        config: Workspace settings.
        make_dirs: Directory creator with create-if-absent semantics.

    Returns:
        WorkspaceLocator whose branch_subdir exists on return.

    Raises:
        NotAGitRepository: If git_context is not a worktree. Nothing is created.
        OSError: If the directory cannot be created.
    """
    if not git_context.is_worktree or git_context.repo_root is None:
        raise NotAGitRepository("Not in a git repository")

    base_dir, source = resolve_base_dir(git_context, environ, home, config)
    branch_subdir = base_dir / branch_dir_name(git_context, config)

    make_dirs(branch_subdir)
    logger.debug(f"Workspace ({source.value}): {branch_subdir}")

    return WorkspaceLocator(base_dir=base_dir, branch_subdir=branch_subdir, source=source)

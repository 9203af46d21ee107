"""
Git context resolution for a working directory.

Answers three questions with plain git plumbing:
- is the directory inside a working tree (rev-parse --is-inside-work-tree)
- where is the top of that tree (rev-parse --show-toplevel)
- which branch is checked out (branch --show-current)

A detached HEAD is reported as ``branch_name=None`` on a valid worktree,
never as "not a repository".
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 10


@dataclass(frozen=True)
class GitResult:
    """Outcome of one git invocation."""

    returncode: int
    stdout: str = ""


@dataclass(frozen=True)
class GitContext:
    """Git facts about a working directory."""

    is_worktree: bool
    repo_root: Optional[Path] = None
    branch_name: Optional[str] = None

    @property
    def repo_name(self) -> Optional[str]:
        """Basename of the repository root."""
        if self.repo_root is None:
            return None
        return self.repo_root.name

    @property
    def is_detached(self) -> bool:
        """True for a worktree with no checked-out branch."""
        return self.is_worktree and not self.branch_name


NOT_A_WORKTREE = GitContext(is_worktree=False)

GitRunner = Callable[[Sequence[str], Path], GitResult]


def run_git(args: Sequence[str], cwd: Path) -> GitResult:
    """
    Run ``git -C <cwd> <args>`` and capture stdout.

    A missing git binary or a timeout is reported as a failed command
    (returncode 127 / 124) rather than raised.
    """
    try:
        result = subprocess.run(
            ["git", "-C", str(cwd), *args],
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
        return GitResult(result.returncode, result.stdout.strip())
    except FileNotFoundError:
        logger.warning("git executable not found")
        return GitResult(127)
    except subprocess.TimeoutExpired:
        logger.warning(f"git {' '.join(args)} timed out after {GIT_TIMEOUT}s")
        return GitResult(124)
    except (subprocess.SubprocessError, OSError) as e:
        logger.warning(f"git {' '.join(args)} failed: {e}")
        return GitResult(1)


def is_inside_work_tree(cwd: Path, runner: GitRunner = run_git) -> bool:
    """Check whether ``cwd`` lies inside a git working tree."""
    result = runner(["rev-parse", "--is-inside-work-tree"], cwd)
    # Inside .git itself git answers "false" with exit 0
    return result.returncode == 0 and result.stdout == "true"


def get_repo_root(cwd: Path, runner: GitRunner = run_git) -> Optional[Path]:
    """Top-level directory of the working tree containing ``cwd``."""
    result = runner(["rev-parse", "--show-toplevel"], cwd)
    if result.returncode != 0 or not result.stdout:
        return None
    return Path(result.stdout)


def get_current_branch(cwd: Path, runner: GitRunner = run_git) -> Optional[str]:
    """
    Name of the checked-out branch, or None when HEAD is detached.

    On an unborn branch (fresh ``git init``) git still reports the branch
    name, so only a detached HEAD yields None.
    """
    result = runner(["branch", "--show-current"], cwd)
    if result.returncode != 0 or not result.stdout:
        return None
    return result.stdout


def resolve_git_context(cwd: Path, runner: GitRunner = run_git) -> GitContext:
    """
    Resolve the full git context for ``cwd``.

    Returns NOT_A_WORKTREE when the directory is not inside a working tree
    (or does not exist).
    """
    cwd = Path(cwd)
    if not cwd.is_dir():
        logger.debug(f"cwd does not exist: {cwd}")
        return NOT_A_WORKTREE

    if not is_inside_work_tree(cwd, runner):
        logger.debug(f"Not inside a git work tree: {cwd}")
        return NOT_A_WORKTREE

    repo_root = get_repo_root(cwd, runner)
    if repo_root is None:
        return NOT_A_WORKTREE

    branch = get_current_branch(cwd, runner)
    if branch is None:
        logger.debug(f"No branch checked out in {repo_root}")

    return GitContext(is_worktree=True, repo_root=repo_root, branch_name=branch)

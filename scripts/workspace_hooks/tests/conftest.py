"""Shared fixtures for workspace hook tests."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from scripts.workspace_hooks.dispatcher import Capabilities
from scripts.workspace_hooks.git_context import GitContext

HOOK_ENV_VARS = (
    "CLAUDE_WORKSPACE",
    "WORKSPACE_HOOKS_CONFIG",
    "WORKSPACE_HOOKS_LOG_FILE",
    "WORKSPACE_HOOKS_DEBUG",
)


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` with a throwaway identity and no signing."""
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            "-c", "init.defaultBranch=main",
            *args,
        ],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the developer's hook settings and enclosing repos out of tests."""
    for name in HOOK_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Stop git from discovering a repository above tmp_path
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))


@pytest.fixture
def home(tmp_path):
    """An empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def git_repo(tmp_path):
    """A fresh repository named ``foo`` on branch ``feature-x``."""
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    repo = tmp_path / "foo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "checkout", "-q", "-b", "feature-x")
    return repo


@pytest.fixture
def detached_repo(git_repo):
    """The ``foo`` repository with HEAD detached at its first commit."""
    git(git_repo, "commit", "-q", "--allow-empty", "-m", "init")
    git(git_repo, "checkout", "-q", "--detach")
    return git_repo


class FakeSigner:
    """Stand-in for the GPG probe that records each call."""

    def __init__(self, ready: bool = True):
        self.ready = ready
        self.calls = []

    def __call__(self, program: str) -> bool:
        self.calls.append(program)
        return self.ready


@pytest.fixture
def make_caps(home):
    """
    Build Capabilities with fake git and signing.

    Usage:
        caps = make_caps(git_context=GitContext(True, Path("/r/foo"), "main"))
    """
    def _make(git_context=None, signing_ready=True, environ=None, make_dirs=None):
        context = git_context if git_context is not None else GitContext(is_worktree=False)
        created = []

        def record_dirs(path):
            created.append(path)

        caps = Capabilities(
            git_context=lambda cwd: context,
            signing_ready=FakeSigner(signing_ready),
            make_dirs=make_dirs or record_dirs,
            environ=dict(environ or {}),
            home=home,
        )
        caps.created = created
        return caps

    return _make


@pytest.fixture
def fake_gpg(tmp_path):
    """
    Directory holding a fake ``gpg`` that exits with $FAKE_GPG_STATUS.

    Each invocation touches $FAKE_GPG_MARKER when that variable is set.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = bin_dir / "gpg"
    script.write_text(
        "#!/bin/sh\n"
        "cat >/dev/null\n"
        'if [ -n "$FAKE_GPG_MARKER" ]; then touch "$FAKE_GPG_MARKER"; fi\n'
        'exit "${FAKE_GPG_STATUS:-0}"\n'
    )
    script.chmod(0o755)
    return bin_dir


@pytest.fixture
def hook_env(home, fake_gpg):
    """Subprocess environment: isolated HOME and the fake gpg first on PATH."""
    env = {
        key: value for key, value in os.environ.items()
        if key not in HOOK_ENV_VARS
    }
    env["HOME"] = str(home)
    env["PATH"] = str(fake_gpg) + os.pathsep + env.get("PATH", "")
    env["GIT_CEILING_DIRECTORIES"] = str(home.parent)
    return env

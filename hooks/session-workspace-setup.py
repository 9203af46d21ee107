#!/usr/bin/env python3
"""
UserPromptSubmit / SessionStart hook: set up the branch workspace.

Blocks when the session is not inside a git repository. Otherwise
creates the per-branch scratch directory and tells the assistant where
it is via additionalContext.

Workspace base, highest priority first:
1. $CLAUDE_WORKSPACE
2. <repo>/.claude/workspace (only if it already exists)
3. ~/.claude/workspace/<repo-name>
"""

import sys
from pathlib import Path

# Plugin root holds the scripts/ package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from scripts.workspace_hooks.cli import main as run_cli
from scripts.workspace_hooks.hook_utils import graceful_hook


@graceful_hook(blocking=False, name="session-workspace-setup")
def main():
    sys.exit(run_cli(["workspace"]))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
GPG readiness check for Claude Code PreToolUse hook.

Reads hook input from stdin. When the command about to run starts with
`git`, tries a non-interactive clearsign and blocks if the signing key
is locked. Other commands pass through without probing.

Exit codes:
  0 = Allow the command
  1 = Malformed hook input
  2 = Block the command (Claude Code convention)
"""

import sys
from pathlib import Path

# Plugin root holds the scripts/ package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from scripts.workspace_hooks.cli import main as run_cli
from scripts.workspace_hooks.hook_utils import graceful_hook


@graceful_hook(blocking=True, name="git-gpg-check")  # Fail secure - block on errors
def main():
    sys.exit(run_cli(["gpg-check"]))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Forward a prompt document to the assistant as additionalContext.

Usage in hooks.json:
    prompt-context-inject.py              # ~/.claude/hook_input/<event>/<repo>.md or default.md
    prompt-context-inject.py notes.md     # always this file

The document is passed through verbatim. Missing documents produce no
output; this hook never blocks.
"""

import sys
from pathlib import Path

# Plugin root holds the scripts/ package
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from scripts.workspace_hooks.cli import main as run_cli
from scripts.workspace_hooks.hook_utils import graceful_hook


@graceful_hook(blocking=False, name="prompt-context-inject")
def main():
    argv = ["context"]
    files = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    if files:
        argv += ["--file", files[0]]
    sys.exit(run_cli(argv))


if __name__ == "__main__":
    main()

"""Allow running as python -m scripts.workspace_hooks."""

import sys

from scripts.workspace_hooks.cli import main

if __name__ == "__main__":
    sys.exit(main())

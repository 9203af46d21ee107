"""
Signing readiness gate for git commands.

Commands are classified with a plain prefix match, not a shell parser:
only a command string that starts with the word ``git`` is gated.
"""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

GIT_COMMAND_PATTERN = re.compile(r"^git(?:\s|$)")

# Clearsigned on stdin; the signature is discarded
PROBE_TEXT = "GPG Card Ok"
GPG_TIMEOUT = 15

CREDENTIAL_LOCKED_REASON = "User needs to unlock GPG card for git operations."

ProbeRunner = Callable[[Sequence[str], str], int]


def is_git_command(command: str) -> bool:
    """True when ``command`` starts with the token ``git``."""
    return bool(command) and GIT_COMMAND_PATTERN.match(command) is not None


def run_probe(args: Sequence[str], stdin_text: str) -> int:
    """
    Run the probe command and return its exit status.

    Output is discarded. A missing binary or a timeout counts as failure.
    """
    try:
        result = subprocess.run(
            list(args),
            input=stdin_text,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=GPG_TIMEOUT,
        )
        return result.returncode
    except FileNotFoundError:
        logger.warning(f"{args[0]} executable not found")
        return 127
    except subprocess.TimeoutExpired:
        logger.warning(f"{args[0]} signing probe timed out after {GPG_TIMEOUT}s")
        return 124
    except (subprocess.SubprocessError, OSError) as e:
        logger.warning(f"{args[0]} signing probe failed: {e}")
        return 1


def probe_command(program: str = "gpg") -> list[str]:
    """Build the non-interactive clearsign command for ``program``."""
    # pinentry-mode error: fail instead of prompting for a passphrase
    return [program, "--pinentry-mode", "error", "--clearsign"]


def probe_signing_ready(program: str = "gpg", runner: ProbeRunner = run_probe) -> bool:
    """
    Check that the signing key is unlocked.

    Attempts a throwaway clearsign with prompting disabled; only the exit
    status is inspected.
    """
    status = runner(probe_command(program), PROBE_TEXT)
    if status != 0:
        logger.debug(f"Signing probe exited with status {status}")
        return False
    return True

"""Command-line interface for the workspace hooks."""

from __future__ import annotations

import argparse
import json
import sys
from enum import IntEnum
from pathlib import Path
from typing import Callable, Optional, TextIO

from scripts.workspace_hooks import dispatcher, workspace
from scripts.workspace_hooks.config import HooksConfig, find_config
from scripts.workspace_hooks.decisions import Decision, encode
from scripts.workspace_hooks.errors import ConfigError, HookError, MalformedInput, NotAGitRepository
from scripts.workspace_hooks.events import HookEvent, parse_event
from scripts.workspace_hooks.hook_utils import (
    BLOCK_EXIT_CODE,
    configure_logging,
    get_context,
    init_context,
    log_blocked,
    read_hook_input,
    write_hook_output,
)


class ExitCode(IntEnum):
    """Process exit codes understood by the host."""

    SUCCESS = 0
    MALFORMED_INPUT = 1
    BLOCK = BLOCK_EXIT_CODE
    CONFIG_ERROR = 3


Handler = Callable[[HookEvent, dispatcher.Capabilities, HooksConfig], Decision]


def _report_error(error: HookError, stderr: TextIO) -> None:
    print(json.dumps(error.to_json()), file=stderr)


def _run_event_command(
    handler: Handler,
    caps: dispatcher.Capabilities,
    config: HooksConfig,
    stdin: TextIO,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Read one event, handle it, write the encoded decision."""
    try:
        event = parse_event(read_hook_input(stdin))
    except MalformedInput as e:
        _report_error(e, stderr)
        return ExitCode.MALFORMED_INPUT

    decision = handler(event, caps, config)
    text, code = encode(decision, event.event_name)

    if decision.blocked:
        log_blocked(decision.reason, command=event.command_text)

    write_hook_output(text, stdout)
    return code


def _context_handler(args: argparse.Namespace) -> Handler:
    document = Path(args.file) if args.file else None

    def handler(event, caps, config):
        return dispatcher.inject_prompt_document(event, caps, config, document=document)

    return handler


def cmd_resolve(
    args: argparse.Namespace,
    caps: dispatcher.Capabilities,
    config: HooksConfig,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Print the workspace path for a directory without reading stdin."""
    cwd = Path(args.cwd) if args.cwd else Path.cwd()
    git_context = caps.git_context(cwd)
    try:
        locator = workspace.resolve_workspace(
            git_context,
            caps.environ,
            caps.home,
            config.workspace,
            make_dirs=caps.make_dirs,
        )
    except NotAGitRepository as e:
        _report_error(e, stderr)
        return ExitCode.BLOCK

    if args.json:
        print(json.dumps({
            "base_dir": str(locator.base_dir),
            "branch_subdir": str(locator.branch_subdir),
            "source": locator.source.value,
            "repo_root": str(git_context.repo_root),
            "branch": git_context.branch_name,
        }), file=stdout)
    else:
        print(locator.branch_subdir, file=stdout)
    return ExitCode.SUCCESS


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workspace-hooks",
        description="Git signing gate and per-branch workspaces for assistant hooks",
    )
    parser.add_argument(
        "--config",
        help="Path to workspace-hooks.yaml (default: ~/.claude/workspace-hooks.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "dispatch",
        help="Read one hook event from stdin and route it by event kind",
    )
    subparsers.add_parser(
        "gpg-check",
        help="PreToolUse: block git commands while the GPG key is locked",
    )
    subparsers.add_parser(
        "workspace",
        help="UserPromptSubmit/SessionStart: resolve and create the branch workspace",
    )

    context_parser = subparsers.add_parser(
        "context",
        help="Forward a prompt document as additional context",
    )
    context_parser.add_argument(
        "--file",
        help="Prompt document to forward (default: look up by event and repo)",
    )

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Print the workspace path for a directory",
    )
    resolve_parser.add_argument("--cwd", help="Directory to resolve (default: current)")
    resolve_parser.add_argument("--json", action="store_true", help="Print details as JSON")

    return parser


def main(
    argv: Optional[list[str]] = None,
    caps: Optional[dispatcher.Capabilities] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)

    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr
    caps = caps if caps is not None else dispatcher.Capabilities()

    configure_logging()
    # A hook wrapper has already set up the context for this run
    if get_context().hook_name is None:
        init_context()

    try:
        config = find_config(args.config, caps.environ, caps.home)
    except ConfigError as e:
        _report_error(e, stderr)
        return ExitCode.CONFIG_ERROR

    if args.command == "resolve":
        return cmd_resolve(args, caps, config, stdout, stderr)

    handlers: dict[str, Handler] = {
        "dispatch": dispatcher.dispatch,
        "gpg-check": dispatcher.check_git_command,
        "workspace": dispatcher.setup_workspace,
    }
    if args.command == "context":
        handler = _context_handler(args)
    else:
        handler = handlers[args.command]

    return _run_event_command(handler, caps, config, stdin, stdout, stderr)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Shared utilities for hook scripts.

Provides graceful failure handling, stdin/stdout plumbing and logging.
Messages go to stderr with a fixed prefix; when WORKSPACE_HOOKS_LOG_FILE
is set, structured JSON-lines entries are appended to that file as well.
"""

import functools
import json
import logging
import os
import sys
import time
import traceback
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, TextIO

from scripts.workspace_hooks.errors import MalformedInput

# Hook output prefix - use this constant for consistent messaging
HOOK_PREFIX = "[workspace-hooks]"

LOG_FILE_ENV_VAR = "WORKSPACE_HOOKS_LOG_FILE"
DEBUG_ENV_VAR = "WORKSPACE_HOOKS_DEBUG"

# Exit code the host reads as "stop and surface the reason"
BLOCK_EXIT_CODE = 2


@dataclass
class HookContext:
    """
    Context for a hook execution.

    Uses contextvars for state management instead of module globals.
    """
    log_file: Optional[str] = None
    hook_name: Optional[str] = None
    start_time: Optional[float] = None


_hook_context: ContextVar[HookContext] = ContextVar(
    'hook_context',
    default=HookContext(log_file=os.environ.get(LOG_FILE_ENV_VAR))
)


def get_context() -> HookContext:
    """Get the current hook context."""
    return _hook_context.get()


def init_context(log_file: Optional[str] = None) -> HookContext:
    """
    Initialize a new hook context.

    Args:
        log_file: Path to structured log file, or None to read
            WORKSPACE_HOOKS_LOG_FILE at call time.

    Returns:
        The initialized context.
    """
    ctx = HookContext(
        log_file=log_file if log_file is not None else os.environ.get(LOG_FILE_ENV_VAR),
    )
    _hook_context.set(ctx)
    return ctx


def is_debug() -> bool:
    return bool(os.environ.get(DEBUG_ENV_VAR)) or "--debug" in sys.argv


def graceful_hook(blocking: bool = False, name: Optional[str] = None):
    """
    Decorator for hook main functions that handles errors gracefully.

    Args:
        blocking: If True, errors cause exit(2) to block. If False, exit(0) to allow.
        name: Optional hook name for logging. Defaults to function name.

    Usage:
        @graceful_hook(blocking=True, name="git-gpg-check")
        def main():
            # hook logic that might fail
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            hook_name = name or func.__name__
            init_context()
            log_hook_start(hook_name)
            try:
                result = func(*args, **kwargs)
                log_hook_end(blocked=False)
                return result
            except SystemExit as e:
                log_hook_end(blocked=(e.code == BLOCK_EXIT_CODE))
                raise
            except KeyboardInterrupt:
                log_hook_end(blocked=False)
                sys.exit(130)
            except BrokenPipeError:
                # stdout closed, common when piping
                log_hook_end(blocked=False)
                sys.exit(0)
            except Exception as e:
                log_error(f"Hook error: {e}", exception=str(e))
                if is_debug():
                    traceback.print_exc(file=sys.stderr)
                log_hook_end(blocked=blocking)
                # Fail open (allow) unless explicitly blocking
                sys.exit(BLOCK_EXIT_CODE if blocking else 0)
        return wrapper
    return decorator


def read_hook_input(stream: Optional[TextIO] = None) -> str:
    """
    Read the raw hook payload from stdin.

    Returns an empty string when stdin is a terminal; parsing and
    validation are left to the caller.

    Raises:
        MalformedInput: The payload is not valid UTF-8.
    """
    stream = stream if stream is not None else sys.stdin
    if stream.isatty():
        return ""
    try:
        return stream.read()
    except UnicodeDecodeError as e:
        raise MalformedInput(f"Hook input is not valid UTF-8: {e}")


def write_hook_output(text: str, stream: Optional[TextIO] = None) -> None:
    """Write hook output to stdout, ignoring a closed pipe."""
    if not text:
        return
    stream = stream if stream is not None else sys.stdout
    try:
        stream.write(text)
        stream.write("\n")
        stream.flush()
    except (IOError, BrokenPipeError):
        pass


def _write_to_log_file(entry: dict) -> None:
    """Write a structured log entry to the log file if configured."""
    ctx = get_context()
    if not ctx.log_file:
        return
    try:
        with open(ctx.log_file, "a") as f:
            f.write(json.dumps(entry) + "\n")
    except (IOError, OSError) as e:
        if is_debug():
            print(f"{HOOK_PREFIX} Log write failed: {e}", file=sys.stderr)


def _make_log_entry(level: str, message: str, **extra) -> dict:
    """Create a structured log entry."""
    ctx = get_context()
    entry = {
        "timestamp": datetime.now().isoformat(),
        "level": level,
        "message": message,
    }
    if ctx.hook_name:
        entry["hook"] = ctx.hook_name
    entry.update(extra)
    return entry


def log_debug(message: str, **extra) -> None:
    """Log a debug message; stderr only in debug mode."""
    if is_debug():
        print(f"{HOOK_PREFIX} {message}", file=sys.stderr)
    _write_to_log_file(_make_log_entry("DEBUG", message, **extra))


def log_info(message: str, **extra) -> None:
    """Log an info message to stderr and optionally to log file."""
    print(f"{HOOK_PREFIX} {message}", file=sys.stderr)
    _write_to_log_file(_make_log_entry("INFO", message, **extra))


def log_warning(message: str, **extra) -> None:
    """Log a warning message to stderr and optionally to log file."""
    print(f"{HOOK_PREFIX} WARNING: {message}", file=sys.stderr)
    _write_to_log_file(_make_log_entry("WARNING", message, **extra))


def log_error(message: str, **extra) -> None:
    """Log an error message to stderr and optionally to log file."""
    print(f"{HOOK_PREFIX} ERROR: {message}", file=sys.stderr)
    _write_to_log_file(_make_log_entry("ERROR", message, **extra))


def log_blocked(reason: str, command: Optional[str] = None) -> None:
    """Log a blocked action with structured data."""
    if command:
        log_error(f"BLOCKED: {reason}", command=command[:200], reason=reason)
    else:
        log_error(f"BLOCKED: {reason}", reason=reason)


def log_hook_start(hook_name: str) -> None:
    """Record hook start time for duration tracking."""
    ctx = get_context()
    ctx.hook_name = hook_name
    ctx.start_time = time.time()
    if ctx.log_file:
        _write_to_log_file(_make_log_entry("DEBUG", f"Hook started: {hook_name}"))


def log_hook_end(blocked: bool = False) -> None:
    """Log hook completion with duration."""
    ctx = get_context()
    if ctx.start_time is not None:
        duration_ms = (time.time() - ctx.start_time) * 1000
        if ctx.log_file:
            _write_to_log_file(_make_log_entry(
                "DEBUG",
                f"Hook completed: {ctx.hook_name}",
                duration_ms=round(duration_ms, 2),
                blocked=blocked
            ))
    ctx.hook_name = None
    ctx.start_time = None


class HookLogHandler(logging.Handler):
    """Route stdlib logging records from the package into the hook log sink."""

    _emitters = {
        logging.DEBUG: log_debug,
        logging.INFO: log_info,
        logging.WARNING: log_warning,
    }

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            self.handleError(record)
            return
        emitter = self._emitters.get(record.levelno, log_error)
        emitter(message, logger=record.name)


def configure_logging(logger_name: str = "scripts.workspace_hooks") -> logging.Logger:
    """Attach the hook log handler to the package logger (idempotent)."""
    logger = logging.getLogger(logger_name)
    if not any(isinstance(h, HookLogHandler) for h in logger.handlers):
        logger.addHandler(HookLogHandler())
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger

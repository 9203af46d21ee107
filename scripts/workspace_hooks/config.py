"""Configuration loading and validation for the workspace hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from scripts.workspace_hooks.errors import ConfigError

# Environment variables read by the hooks
CONFIG_ENV_VAR = "WORKSPACE_HOOKS_CONFIG"
DEFAULT_WORKSPACE_ENV_VAR = "CLAUDE_WORKSPACE"

# Default paths, relative to the user's home unless noted
DEFAULT_CONFIG_PATH = ".claude/workspace-hooks.yaml"
DEFAULT_WORKSPACE_ROOT = "~/.claude/workspace"
DEFAULT_REPO_LOCAL_DIR = ".claude/workspace"  # relative to the repo root
DEFAULT_PROMPT_DIR = "~/.claude/hook_input"
DEFAULT_DETACHED_NAME = "detached"


@dataclass
class WorkspaceConfig:
    """Workspace resolution settings."""

    env_var: str = DEFAULT_WORKSPACE_ENV_VAR
    repo_local_dir: str = DEFAULT_REPO_LOCAL_DIR
    default_root: str = DEFAULT_WORKSPACE_ROOT
    detached_name: str = DEFAULT_DETACHED_NAME


@dataclass
class GpgConfig:
    """Signing gate settings."""

    enabled: bool = True
    program: str = "gpg"


@dataclass
class HooksConfig:
    """Complete hooks configuration."""

    version: str = "1.0"
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    gpg: GpgConfig = field(default_factory=GpgConfig)
    prompt_dir: str = DEFAULT_PROMPT_DIR
    prompt_documents: bool = False


def get_default_config() -> HooksConfig:
    """Return the default hooks configuration."""
    return HooksConfig()


def expand_path(value: str, home: Path) -> Path:
    """Expand a leading ``~`` against ``home`` rather than the process HOME."""
    if value == "~":
        return home
    if value.startswith("~/"):
        return home / value[2:]
    return Path(value)


def _section(data: dict[str, Any], key: str, config_file: Optional[str]) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping", file=config_file)
    return value


def _parse_workspace(ws_dict: dict[str, Any]) -> WorkspaceConfig:
    defaults = WorkspaceConfig()
    return WorkspaceConfig(
        env_var=ws_dict.get("env_var", defaults.env_var),
        repo_local_dir=ws_dict.get("repo_local_dir", defaults.repo_local_dir),
        default_root=ws_dict.get("default_root", defaults.default_root),
        detached_name=ws_dict.get("detached_name", defaults.detached_name),
    )


def _parse_gpg(gpg_dict: dict[str, Any]) -> GpgConfig:
    defaults = GpgConfig()
    return GpgConfig(
        enabled=gpg_dict.get("enabled", defaults.enabled),
        program=gpg_dict.get("program", defaults.program),
    )


def validate_config(config: HooksConfig, config_file: Optional[str] = None) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration is invalid.
    """
    ws = config.workspace
    for name in ("env_var", "repo_local_dir", "default_root", "detached_name"):
        value = getattr(ws, name)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(
                f"workspace.{name} must be a non-empty string",
                file=config_file,
            )

    # The placeholder is a single path segment
    if "/" in ws.detached_name or ws.detached_name in (".", ".."):
        raise ConfigError(
            f"workspace.detached_name '{ws.detached_name}' must be a plain directory name",
            file=config_file,
        )

    if not isinstance(config.gpg.enabled, bool):
        raise ConfigError("gpg.enabled must be true or false", file=config_file)
    if not isinstance(config.gpg.program, str) or not config.gpg.program.strip():
        raise ConfigError("gpg.program must be a non-empty string", file=config_file)

    if not isinstance(config.prompt_dir, str) or not config.prompt_dir.strip():
        raise ConfigError("prompt_dir must be a non-empty string", file=config_file)
    if not isinstance(config.prompt_documents, bool):
        raise ConfigError("prompt_documents must be true or false", file=config_file)


def load_config(config_path: Path | str) -> HooksConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the workspace-hooks.yaml file.

    Returns:
        HooksConfig with loaded values merged with defaults.

    Raises:
        ConfigError: If the file exists but contains invalid configuration.
    """
    config_path = Path(config_path)
    config_file = str(config_path)

    defaults = get_default_config()

    if not config_path.exists():
        return defaults

    try:
        content = config_path.read_text(encoding="utf-8")
        if not content.strip():
            return defaults

        data = yaml.safe_load(content)
        if not data:
            return defaults
        if not isinstance(data, dict):
            raise ConfigError(
                "Top-level hooks config must be a mapping",
                file=config_file,
            )

    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", file=config_file)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config: {e}", file=config_file)

    config = HooksConfig(
        version=str(data.get("version", defaults.version)),
        workspace=_parse_workspace(_section(data, "workspace", config_file)),
        gpg=_parse_gpg(_section(data, "gpg", config_file)),
        prompt_dir=data.get("prompt_dir", defaults.prompt_dir),
        prompt_documents=data.get("prompt_documents", defaults.prompt_documents),
    )

    validate_config(config, config_file)

    return config


def find_config(
    config_path: Optional[str],
    environ: Mapping[str, str],
    home: Path,
) -> HooksConfig:
    """Load config from the first source that applies.

    Search order:
    1. Explicit --config path
    2. $WORKSPACE_HOOKS_CONFIG
    3. ~/.claude/workspace-hooks.yaml
    4. Built-in defaults
    """
    if config_path:
        return load_config(config_path)

    env_path = environ.get(CONFIG_ENV_VAR)
    if env_path:
        return load_config(expand_path(env_path, home))

    return load_config(home / DEFAULT_CONFIG_PATH)  # Defaults when absent


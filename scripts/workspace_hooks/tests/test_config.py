"""Tests for hooks configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from scripts.workspace_hooks.config import (
    HooksConfig,
    expand_path,
    find_config,
    get_default_config,
    load_config,
)
from scripts.workspace_hooks.errors import ConfigError


class TestDefaultConfig:
    def test_defaults(self):
        config = get_default_config()
        assert isinstance(config, HooksConfig)
        assert config.workspace.env_var == "CLAUDE_WORKSPACE"
        assert config.workspace.repo_local_dir == ".claude/workspace"
        assert config.workspace.default_root == "~/.claude/workspace"
        assert config.workspace.detached_name == "detached"
        assert config.gpg.enabled is True
        assert config.gpg.program == "gpg"
        assert config.prompt_documents is False


class TestLoadConfig:
    """Tests for loading configuration from file."""

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_config(tmp_path / "nonexistent.yaml") == get_default_config()

    def test_empty_file_returns_defaults(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text("")
        assert load_config(config_file) == get_default_config()

    def test_partial_config_merges_with_defaults(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text(yaml.dump({
            "workspace": {"detached_name": "no-branch"},
            "gpg": {"program": "gpg2"},
        }))
        config = load_config(config_file)
        assert config.workspace.detached_name == "no-branch"
        assert config.workspace.env_var == "CLAUDE_WORKSPACE"
        assert config.gpg.program == "gpg2"
        assert config.gpg.enabled is True

    def test_non_mapping_raises_error(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text("- item1\n- item2\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_file)
        assert "must be a mapping" in str(exc_info.value)

    def test_invalid_yaml_raises_error(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text("{ invalid yaml: [")
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_file)
        assert exc_info.value.to_json()["error"] == "config_invalid"
        assert exc_info.value.to_json()["file"] == str(config_file)

    def test_non_utf8_file_raises_error(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_bytes(b"prompt_dir: \xff\xfe\n")
        with pytest.raises(ConfigError, match="Cannot read config") as exc_info:
            load_config(config_file)
        assert exc_info.value.to_json()["file"] == str(config_file)

    def test_section_must_be_mapping(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text(yaml.dump({"gpg": "off"}))
        with pytest.raises(ConfigError, match="'gpg' must be a mapping"):
            load_config(config_file)


class TestValidateConfig:
    @pytest.mark.parametrize("name", ["", "a/b", ".."])
    def test_bad_placeholder(self, tmp_path, name):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text(yaml.dump({"workspace": {"detached_name": name}}))
        with pytest.raises(ConfigError, match="detached_name"):
            load_config(config_file)

    def test_non_bool_gpg_enabled(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text(yaml.dump({"gpg": {"enabled": "sometimes"}}))
        with pytest.raises(ConfigError, match="gpg.enabled"):
            load_config(config_file)

    def test_non_bool_prompt_documents(self, tmp_path):
        config_file = tmp_path / "hooks.yaml"
        config_file.write_text(yaml.dump({"prompt_documents": "yes please"}))
        with pytest.raises(ConfigError, match="prompt_documents"):
            load_config(config_file)


class TestFindConfig:
    """Config source lookup order."""

    def test_explicit_path_first(self, tmp_path, home):
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text(yaml.dump({"gpg": {"program": "explicit"}}))
        env_file = tmp_path / "env.yaml"
        env_file.write_text(yaml.dump({"gpg": {"program": "env"}}))
        config = find_config(str(explicit), {"WORKSPACE_HOOKS_CONFIG": str(env_file)}, home)
        assert config.gpg.program == "explicit"

    def test_environment_path(self, tmp_path, home):
        env_file = tmp_path / "env.yaml"
        env_file.write_text(yaml.dump({"gpg": {"program": "env"}}))
        config = find_config(None, {"WORKSPACE_HOOKS_CONFIG": str(env_file)}, home)
        assert config.gpg.program == "env"

    def test_home_default(self, home):
        (home / ".claude").mkdir()
        (home / ".claude" / "workspace-hooks.yaml").write_text(
            yaml.dump({"gpg": {"program": "home"}})
        )
        assert find_config(None, {}, home).gpg.program == "home"

    def test_built_in_defaults(self, home):
        assert find_config(None, {}, home) == get_default_config()


class TestExpandPath:
    def test_tilde(self):
        assert expand_path("~", Path("/h")) == Path("/h")
        assert expand_path("~/a/b", Path("/h")) == Path("/h/a/b")

    def test_plain(self):
        assert expand_path("/abs", Path("/h")) == Path("/abs")

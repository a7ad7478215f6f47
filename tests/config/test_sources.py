"""Tests for the layered YAML settings source.

Tests for LayeredYamlSettingsSource:
- Loading the built-in defaults
- Layer precedence (built-in < user < project)
- Handling missing and empty files gracefully
- Handling malformed YAML
"""

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings
import pytest as _pytest

import agent_skill_manager.config.sources as sources


class MinimalSettings(_pydantic_settings.BaseSettings):
    """Minimal settings class for exercising the source directly."""

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="TEST_",
        extra="ignore",
    )

    version: int = 0
    distribution: str = "merge"
    agents: dict[str, _typing.Any] = _pydantic.Field(default_factory=dict)


def _write(path: _pathlib.Path, content: str) -> _pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_mappings_merge(self) -> None:
        base = {"agents": {"a": {"x": 1, "y": 2}}, "version": 1}
        override = {"agents": {"a": {"y": 3}, "b": {"x": 4}}}
        assert sources.deep_merge(base, override) == {
            "agents": {"a": {"x": 1, "y": 3}, "b": {"x": 4}},
            "version": 1,
        }

    def test_non_mapping_values_override(self) -> None:
        """Lists and scalars replace rather than merge."""
        base = {"default_agents": ["a", "b"], "agents": {"a": {}}}
        override = {"default_agents": ["c"], "agents": "flat"}
        assert sources.deep_merge(base, override) == {
            "default_agents": ["c"],
            "agents": "flat",
        }

    def test_inputs_are_not_modified(self) -> None:
        base = {"agents": {"a": {"x": 1}}}
        override = {"agents": {"a": {"x": 2}}}
        merged = sources.deep_merge(base, override)
        merged["agents"]["a"]["x"] = 99
        assert base == {"agents": {"a": {"x": 1}}}
        assert override == {"agents": {"a": {"x": 2}}}


class TestHelperFunctions:
    """Tests for path helper functions."""

    def test_get_builtin_defaults_path(self) -> None:
        path = sources.get_builtin_defaults_path()
        assert path.name == "config.yaml"
        assert path.parent.name == "defaults"
        assert path.is_file()

    def test_get_user_config_dir_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ASM_CONFIG_DIR", raising=False)
        assert sources.get_user_config_dir() == _pathlib.Path.home() / ".config" / "asm"

    def test_get_user_config_path_with_env_var(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ASM_CONFIG_DIR", "/custom/config/dir")
        assert sources.get_user_config_path() == _pathlib.Path("/custom/config/dir/config.yaml")

    def test_get_project_config_path(self) -> None:
        project_root = _pathlib.Path("/some/project")
        assert sources.get_project_config_path(project_root) == (
            project_root / ".asm" / "config.yaml"
        )


class TestLayeredYamlSettingsSource:
    """Tests for loading and merging config layers."""

    def test_is_pydantic_settings_source(self) -> None:
        assert issubclass(
            sources.LayeredYamlSettingsSource,
            _pydantic_settings.PydanticBaseSettingsSource,
        )

    def test_loads_builtin_defaults(self, tmp_path: _pathlib.Path) -> None:
        """The bundled defaults define the agent table."""
        source = sources.LayeredYamlSettingsSource(
            MinimalSettings, user_config_path=tmp_path / "missing.yaml"
        )
        data = source()
        assert data["version"] == 1
        assert data["distribution"] == "merge"
        assert set(data["agents"]) == {"claude-code", "codex-cli", "gemini-cli", "opencode"}

    def test_layer_precedence(self, tmp_path: _pathlib.Path) -> None:
        """Project overrides user overrides built-in; agent tables merge."""
        builtin = _write(
            tmp_path / "builtin.yaml",
            "version: 1\ndistribution: merge\nagents:\n  a:\n    config_dir: .a\n",
        )
        user = _write(
            tmp_path / "user.yaml",
            "distribution: link\nagents:\n  b:\n    config_dir: .b\n",
        )
        project_root = tmp_path / "repo"
        _write(
            project_root / ".asm" / "config.yaml",
            "distribution: merge\nagents:\n  a:\n    config_file: A.md\n",
        )

        source = sources.LayeredYamlSettingsSource(
            MinimalSettings,
            project_root,
            user_config_path=user,
            builtin_config_path=builtin,
        )
        data = source()

        assert data["distribution"] == "merge"
        assert data["agents"] == {
            "a": {"config_dir": ".a", "config_file": "A.md"},
            "b": {"config_dir": ".b"},
        }
    def test_empty_optional_layer_is_skipped(self, tmp_path: _pathlib.Path) -> None:
        user = _write(tmp_path / "user.yaml", "")
        source = sources.LayeredYamlSettingsSource(MinimalSettings, user_config_path=user)
        baseline = sources.LayeredYamlSettingsSource(
            MinimalSettings, user_config_path=tmp_path / "missing.yaml"
        )
        assert source() == baseline()

    def test_missing_builtin_defaults(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="built-in defaults not found"):
            sources.LayeredYamlSettingsSource(
                MinimalSettings, builtin_config_path=tmp_path / "nope.yaml"
            )

    def test_empty_builtin_defaults(self, tmp_path: _pathlib.Path) -> None:
        builtin = _write(tmp_path / "builtin.yaml", "# nothing\n")
        with _pytest.raises(sources.ConfigFileError, match="empty"):
            sources.LayeredYamlSettingsSource(MinimalSettings, builtin_config_path=builtin)

    def test_malformed_yaml(self, tmp_path: _pathlib.Path) -> None:
        user = _write(tmp_path / "user.yaml", "agents: [unclosed\n")
        with _pytest.raises(sources.ConfigFileError, match="invalid YAML") as exc_info:
            sources.LayeredYamlSettingsSource(MinimalSettings, user_config_path=user)
        assert exc_info.value.path == user

    def test_non_mapping_yaml(self, tmp_path: _pathlib.Path) -> None:
        user = _write(tmp_path / "user.yaml", "- just\n- a list\n")
        with _pytest.raises(sources.ConfigFileError, match="got list"):
            sources.LayeredYamlSettingsSource(MinimalSettings, user_config_path=user)

    def test_call_returns_copy(self, tmp_path: _pathlib.Path) -> None:
        source = sources.LayeredYamlSettingsSource(
            MinimalSettings, user_config_path=tmp_path / "missing.yaml"
        )
        source()["agents"].clear()
        assert source()["agents"]

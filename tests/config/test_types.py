"""Tests for configuration type definitions."""

import pathlib as _pathlib

import pydantic as _pydantic
import pytest as _pytest

import agent_skill_manager.config.types as types


class TestAgentConfig:
    """Tests for AgentConfig."""

    def test_skills_dirs_derived_from_config_locations(self) -> None:
        agent = types.AgentConfig(
            display_name="Claude Code",
            config_dir=".claude",
            config_file="CLAUDE.md",
            global_config_file="/home/u/.claude/CLAUDE.md",
        )
        assert agent.skills_dir == ".claude/skills"
        assert agent.global_skills_dir == _pathlib.Path("/home/u/.claude/skills")

    def test_explicit_skills_dirs_are_kept(self) -> None:
        agent = types.AgentConfig(
            display_name="X",
            config_dir=".x",
            config_file="X.md",
            global_config_file="/home/u/.x/X.md",
            skills_dir="custom/skills",
            global_skills_dir="/opt/x-skills",
        )
        assert agent.skills_dir == "custom/skills"
        assert agent.global_skills_dir == _pathlib.Path("/opt/x-skills")

    def test_expands_home(self, monkeypatch: _pytest.MonkeyPatch, tmp_path: _pathlib.Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        agent = types.AgentConfig(
            display_name="X",
            config_dir=".x",
            config_file="X.md",
            global_config_file="~/.x/X.md",
        )
        assert agent.global_config_file == tmp_path / ".x" / "X.md"
        assert agent.global_skills_dir == tmp_path / ".x" / "skills"

    def test_local_config_path(self) -> None:
        agent = types.AgentConfig(
            display_name="Gemini CLI",
            config_dir=".gemini",
            config_file="GEMINI.md",
            global_config_file="/g/GEMINI.md",
        )
        assert str(agent.local_config_path) == ".gemini/GEMINI.md"

    def test_required_fields(self) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            types.AgentConfig(display_name="", config_dir=".x", config_file="X.md")  # type: ignore[call-arg]

    def test_extra_fields_preserved(self) -> None:
        agent = types.AgentConfig(
            display_name="X",
            config_dir=".x",
            config_file="X.md",
            global_config_file="/x/X.md",
            homepage="https://example.com",  # type: ignore[call-arg]
        )
        assert agent.model_extra == {"homepage": "https://example.com"}

"""
Shared pytest fixtures for Agent Skill Manager tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import agent_skill_manager.agents as agents
import agent_skill_manager.config as config
import agent_skill_manager.skills as skills


@_pytest.fixture(autouse=True)
def isolate_asm_env(monkeypatch: _pytest.MonkeyPatch) -> None:
    """Drop ASM_* variables of the developer's shell for every test."""
    for key in list(_os.environ):
        if key.startswith("ASM_"):
            monkeypatch.delenv(key)


# =============================================================================
# Agent table
# =============================================================================


def make_agent_table(home: _pathlib.Path) -> dict[str, config.AgentConfig]:
    """Synthetic agent table with global paths under a fake home."""
    return {
        "claude-code": config.AgentConfig(
            display_name="Claude Code",
            config_dir=".claude",
            config_file="CLAUDE.md",
            global_config_file=home / ".claude" / "CLAUDE.md",
        ),
        "gemini-cli": config.AgentConfig(
            display_name="Gemini CLI",
            config_dir=".gemini",
            config_file="GEMINI.md",
            global_config_file=home / ".gemini" / "GEMINI.md",
        ),
        "opencode": config.AgentConfig(
            display_name="OpenCode",
            config_dir=".opencode",
            config_file="AGENTS.md",
            global_config_file=home / ".opencode" / "AGENTS.md",
        ),
    }


@_pytest.fixture
def fake_home(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """Directory standing in for the user's home."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@_pytest.fixture
def registry(fake_home: _pathlib.Path) -> agents.AgentRegistry:
    """AgentRegistry over the synthetic agent table."""
    return agents.AgentRegistry(make_agent_table(fake_home))


# =============================================================================
# Stores
# =============================================================================


@_pytest.fixture
def user_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """User store root (not created until the first save)."""
    return tmp_path / "user-skills"


@_pytest.fixture
def builtin_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """Empty built-in store root."""
    path = tmp_path / "builtin-skills"
    path.mkdir()
    return path


@_pytest.fixture
def store(user_dir: _pathlib.Path, builtin_dir: _pathlib.Path) -> skills.SkillStore:
    """SkillStore over temporary user and built-in directories."""
    return skills.SkillStore(user_dir, builtin_dir)


@_pytest.fixture
def write_builtin(builtin_dir: _pathlib.Path) -> _typing.Callable[..., _pathlib.Path]:
    """
    Factory that writes a skill into the built-in store.

    Usage:
        def test_something(write_builtin):
            write_builtin("shared", description="Built-in version")
    """

    def _write(name: str, **fields: _typing.Any) -> _pathlib.Path:
        skill = skills.Skill.create(name, **fields)
        skill_dir = builtin_dir / name
        skill_dir.mkdir(parents=True, exist_ok=True)
        skill_file = skill_dir / "SKILL.md"
        skill_file.write_text(skills.encode_skill(skill), encoding="utf-8")
        return skill_file

    return _write


@_pytest.fixture
def sample_skill() -> skills.Skill:
    """A fully populated skill."""
    return skills.Skill(
        name="review-checklist",
        description="Checklist for reviewing pull requests",
        content="# Review Checklist\n\n- Tests pass\n- Docs updated",
        tags=["review", "quality"],
        agents=["claude-code"],
        created_at="2026-01-15T10:00:00+00:00",
        updated_at="2026-01-15T10:30:00+00:00",
    )


# =============================================================================
# Repositories
# =============================================================================


@_pytest.fixture
def repo_dir(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """A directory that looks like a git repository."""
    path = tmp_path / "repo"
    (path / ".git").mkdir(parents=True)
    return path.resolve()


# =============================================================================
# CLI environment
# =============================================================================


@_pytest.fixture
def cli_env(
    tmp_path: _pathlib.Path,
    fake_home: _pathlib.Path,
    user_dir: _pathlib.Path,
    builtin_dir: _pathlib.Path,
) -> dict[str, str]:
    """
    Environment for CliRunner isolated from the real user.

    HOME points at the fake home, so the bundled agent table resolves its
    global paths there. ASM_* variables from the outer environment are
    dropped.
    """
    env = {k: v for k, v in _os.environ.items() if not k.startswith("ASM_")}
    env.update(
        {
            "HOME": str(fake_home),
            "ASM_SKILLS_DIR": str(user_dir),
            "ASM_BUILTIN_SKILLS_DIR": str(builtin_dir),
            "ASM_CONFIG_DIR": str(tmp_path / "config"),
        }
    )
    env.pop("NO_COLOR", None)
    return env

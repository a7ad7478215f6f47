"""
Integration tests for builtin skills.

Verifies the full path from:
1. The bundled builtin_skills directory
2. Loading through a SkillStore with the default settings
3. Applying a built-in skill to a repository
"""

import pathlib as _pathlib

import pytest as _pytest

import agent_skill_manager.agents as agents
import agent_skill_manager.builtin_skills as builtin_skills
import agent_skill_manager.config as config
import agent_skill_manager.constants as constants
import agent_skill_manager.errors as errors
import agent_skill_manager.skills as skills

BUNDLED = ["code-review", "commit-messages"]


@_pytest.fixture
def settings(
    tmp_path: _pathlib.Path,
    fake_home: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> config.Settings:
    """Default settings outside any repository with an empty user store."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("ASM_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("ASM_SKILLS_DIR", str(tmp_path / "user-skills"))
    return config.Settings()


@_pytest.fixture
def bundled_store(settings: config.Settings) -> skills.SkillStore:
    return skills.SkillStore(settings.user_skills_dir, settings.builtin_skills_path)


class TestBundledSkills:
    """The skills shipped in the package."""

    def test_builtin_path_exists(self) -> None:
        path = builtin_skills.get_builtin_skills_path()
        assert path.is_dir()
        for name in BUNDLED:
            assert (path / name / constants.SKILL_FILE_NAME).is_file()

    def test_listed_as_builtin(self, bundled_store: skills.SkillStore) -> None:
        assert [s.name for s in bundled_store.list()] == BUNDLED
        for name in BUNDLED:
            assert bundled_store.source_of(name) == "builtin"

    @_pytest.mark.parametrize("name", BUNDLED)
    def test_documents_have_metadata(
        self, bundled_store: skills.SkillStore, settings: config.Settings, name: str
    ) -> None:
        """Each bundled document decodes with a description, tags and known agents."""
        skill = bundled_store.get(name)
        assert skill.name == name
        assert skill.description
        assert skill.tags
        assert skill.content.startswith("# ")
        agents.AgentRegistry(settings.agents).validate(skill.agents)

    def test_builtin_cannot_be_deleted(self, bundled_store: skills.SkillStore) -> None:
        with _pytest.raises(errors.ProtectedSkillError):
            bundled_store.delete("code-review")
        assert bundled_store.exists("code-review")


class TestApplyBuiltin:
    """Applying a bundled skill end to end."""

    def test_merge_into_repository(
        self,
        bundled_store: skills.SkillStore,
        settings: config.Settings,
        repo_dir: _pathlib.Path,
    ) -> None:
        registry = agents.AgentRegistry(settings.agents)
        distributor = skills.SkillDistributor(
            registry, skills.create_strategy(settings.distribution, registry, bundled_store)
        )
        scope = skills.Scope.repository(repo_dir)

        target = distributor.apply(bundled_store.get("commit-messages"), "codex-cli", scope)

        assert target == repo_dir / ".codex" / "CODEX.md"
        assert "<!-- Skill: commit-messages -->" in target.read_text(encoding="utf-8")
        assert distributor.status("commit-messages", scope) == {"codex-cli"}

"""
Skill distribution: projecting stored skills into agent config locations.

Two projection strategies are available; one is selected per install via
the `distribution` setting:

- InlineMergeStrategy ("merge", default): the skill is written as a
  delimited section into the agent's shared config document
  (e.g. .claude/CLAUDE.md or ~/.claude/CLAUDE.md):

      <!-- Skill: review-checklist -->
      ## review-checklist
      ...
      <!-- End Skill: review-checklist -->

- LinkStrategy ("link"): the skill directory is symlinked into the
  agent's skills directory (e.g. .claude/skills/review-checklist).

Both are idempotent: applying twice leaves the same state as applying
once, and removing something that is not applied changes nothing.
"""

from __future__ import annotations

import abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import re as _re
import typing as _typing

import agent_skill_manager.agents as agents
import agent_skill_manager.constants as constants
import agent_skill_manager.errors as errors
import agent_skill_manager.repo as repo
import agent_skill_manager.skills.skill as skill_module
import agent_skill_manager.skills.store as store_module

_logger = _logging.getLogger(__name__)

StrategyName = _typing.Literal["merge", "link"]


@_dataclasses.dataclass(frozen=True)
class Scope:
    """
    Where a skill is applied: globally for the user, or to one repository.

    A repository path is resolved and checked on construction, so every
    Scope with a repo_path points at an existing directory.

    Raises:
        InvalidPathError: If repo_path is not an existing directory.
    """

    repo_path: _pathlib.Path | None = None

    def __post_init__(self) -> None:
        if self.repo_path is not None:
            object.__setattr__(
                self, "repo_path", repo.validate_repository_path(self.repo_path)
            )

    @classmethod
    def global_scope(cls) -> Scope:
        """Per-user scope."""
        return cls(None)

    @classmethod
    def repository(cls, path: _pathlib.Path | str) -> Scope:
        """
        Repository scope.

        Raises:
            InvalidPathError: If path is not an existing directory.
        """
        return cls(_pathlib.Path(path))

    @property
    def is_global(self) -> bool:
        return self.repo_path is None

    def __str__(self) -> str:
        return "global" if self.repo_path is None else str(self.repo_path)


class ProjectionStrategy(_abc.ABC):
    """
    Abstract base class for projection strategies.

    Strategies materialize a skill for one agent at one scope. Agent ids
    are validated by the distributor before a strategy is called.
    """

    name: _typing.ClassVar[StrategyName]

    def __init__(self, registry: agents.AgentRegistry) -> None:
        """
        Initialize the strategy.

        Args:
            registry: Agent descriptor table.
        """
        self._registry = registry

    @_abc.abstractmethod
    def destination(self, skill_name: str, agent_id: str, scope: Scope) -> _pathlib.Path:
        """Path the projection of a skill lives at."""
        ...

    @_abc.abstractmethod
    def apply(self, skill: skill_module.Skill, agent_id: str, scope: Scope) -> _pathlib.Path:
        """
        Project a skill, replacing any previous projection.

        Returns:
            The destination path.
        """
        ...

    @_abc.abstractmethod
    def remove(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        """
        Remove a projection.

        Returns:
            True if something was removed, False if nothing was applied.
        """
        ...

    @_abc.abstractmethod
    def is_applied(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        """Whether a projection currently exists. Does not need the skill."""
        ...


class InlineMergeStrategy(ProjectionStrategy):
    """Inject skills as delimited sections of the agent's config document."""

    name = "merge"

    def destination(self, skill_name: str, agent_id: str, scope: Scope) -> _pathlib.Path:
        if scope.repo_path is None:
            return self._registry.global_config_path(agent_id)
        return self._registry.local_config_path(scope.repo_path, agent_id)

    @staticmethod
    def section_pattern(skill_name: str, *, trailing_newline: bool = False) -> _re.Pattern[str]:
        """Regex matching the first section of a skill (markers included)."""
        start = _re.escape(constants.SECTION_START.format(name=skill_name))
        end = _re.escape(constants.SECTION_END.format(name=skill_name))
        tail = r"\n?" if trailing_newline else ""
        return _re.compile(f"{start}.*?{end}{tail}", _re.DOTALL)

    @staticmethod
    def render_section(skill: skill_module.Skill) -> str:
        """Render the section injected for a skill."""
        parts = [f"## {skill.name}"]
        if skill.description:
            parts.append(skill.description)
        if skill.content:
            parts.append(skill.content)
        body = "\n\n".join(parts)
        start = constants.SECTION_START.format(name=skill.name)
        end = constants.SECTION_END.format(name=skill.name)
        return f"{start}\n{body}\n{end}"

    def apply(self, skill: skill_module.Skill, agent_id: str, scope: Scope) -> _pathlib.Path:
        target = self.destination(skill.name, agent_id, scope)
        document = target.read_text(encoding="utf-8") if target.exists() else ""
        section = self.render_section(skill)
        pattern = self.section_pattern(skill.name)

        if pattern.search(document):
            # Callable replacement so backslashes in content are kept literally
            updated = pattern.sub(lambda _match: section, document, count=1)
        elif document.strip():
            updated = f"{document.rstrip()}\n\n{section}\n"
        else:
            updated = f"{section}\n"

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(updated, encoding="utf-8")
        _logger.debug("Merged skill %s into %s", skill.name, target)
        return target

    def remove(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        target = self.destination(skill_name, agent_id, scope)
        if not target.is_file():
            return False

        document = target.read_text(encoding="utf-8")
        pattern = self.section_pattern(skill_name, trailing_newline=True)
        if not pattern.search(document):
            return False

        remaining = pattern.sub("", document, count=1).strip()
        target.write_text(f"{remaining}\n" if remaining else "", encoding="utf-8")
        _logger.debug("Removed skill %s from %s", skill_name, target)
        return True

    def is_applied(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        target = self.destination(skill_name, agent_id, scope)
        if not target.is_file():
            return False
        return self.section_pattern(skill_name).search(target.read_text(encoding="utf-8")) is not None


class LinkStrategy(ProjectionStrategy):
    """Symlink skill directories into the agent's skills directory.

    The whole directory is linked so auxiliary files (scripts, templates,
    references) travel with SKILL.md. A link is reported as applied even
    when its target has since been deleted.

    Only symlinks are ever replaced or removed. A real file or directory
    at the destination belongs to the user and is left alone.
    """

    name = "link"

    def __init__(
        self,
        registry: agents.AgentRegistry,
        store: store_module.SkillStore,
    ) -> None:
        """
        Initialize the strategy.

        Args:
            registry: Agent descriptor table.
            store: Store used to resolve the directory a link points at.
        """
        super().__init__(registry)
        self._store = store

    def destination(self, skill_name: str, agent_id: str, scope: Scope) -> _pathlib.Path:
        if scope.repo_path is None:
            return self._registry.global_skills_dir(agent_id) / skill_name
        return self._registry.local_skills_dir(scope.repo_path, agent_id) / skill_name

    def apply(self, skill: skill_module.Skill, agent_id: str, scope: Scope) -> _pathlib.Path:
        """
        Link the skill directory, replacing a previous link.

        Raises:
            SkillNotFoundError: If the skill is in neither store.
            ProjectionConflictError: If a real file or directory occupies
                the destination.
        """
        source = self._store.skill_dir(skill.name)
        if source is None:
            raise errors.SkillNotFoundError(skill.name)

        link = self.destination(skill.name, agent_id, scope)
        if link.is_symlink():
            link.unlink()
        elif link.exists():
            raise errors.ProjectionConflictError(skill.name, link)

        link.parent.mkdir(parents=True, exist_ok=True)
        link.symlink_to(source.resolve(), target_is_directory=True)
        _logger.debug("Linked %s -> %s", link, source)
        return link

    def remove(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        link = self.destination(skill_name, agent_id, scope)
        if not link.is_symlink():
            if link.exists():
                _logger.warning("Not removing %s: it is not a link created by asm", link)
            return False
        link.unlink()
        _logger.debug("Removed link %s", link)
        return True

    def is_applied(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        return self.destination(skill_name, agent_id, scope).is_symlink()


def create_strategy(
    kind: StrategyName,
    registry: agents.AgentRegistry,
    store: store_module.SkillStore,
) -> ProjectionStrategy:
    """
    Build the projection strategy named by the `distribution` setting.

    Raises:
        ValueError: If kind is not a known strategy.
    """
    if kind == "merge":
        return InlineMergeStrategy(registry)
    if kind == "link":
        return LinkStrategy(registry, store)
    raise ValueError(f"Unknown distribution strategy: {kind}")


class SkillDistributor:
    """
    Applies, removes and reports skill projections across agents.

    Every agent id is checked against the registry before any filesystem
    access, and skill names are validated like store names.
    """

    def __init__(
        self,
        registry: agents.AgentRegistry,
        strategy: ProjectionStrategy,
    ) -> None:
        """
        Initialize the distributor.

        Args:
            registry: Agent descriptor table.
            strategy: Projection strategy to use.
        """
        self._registry = registry
        self._strategy = strategy

    @property
    def strategy(self) -> ProjectionStrategy:
        return self._strategy

    @property
    def registry(self) -> agents.AgentRegistry:
        return self._registry

    def destination(self, skill_name: str, agent_id: str, scope: Scope) -> _pathlib.Path:
        """Where a skill's projection for an agent lives."""
        self._registry.get(agent_id)
        return self._strategy.destination(
            store_module.validate_skill_name(skill_name), agent_id, scope
        )

    def apply(self, skill: skill_module.Skill, agent_id: str, scope: Scope) -> _pathlib.Path:
        """
        Project a skill for one agent.

        Returns:
            The destination path.

        Raises:
            UnknownAgentError: If agent_id is not in the registry.
        """
        self._registry.get(agent_id)
        store_module.validate_skill_name(skill.name)
        destination = self._strategy.apply(skill, agent_id, scope)
        _logger.debug("Applied %s for %s at %s scope", skill.name, agent_id, scope)
        return destination

    def apply_many(
        self,
        skill: skill_module.Skill,
        agent_ids: _typing.Iterable[str],
        scope: Scope,
    ) -> dict[str, _pathlib.Path]:
        """
        Project a skill for several agents.

        All ids are validated before the first projection is written.

        Returns:
            Mapping of agent id to destination path.
        """
        checked = self._registry.validate(agent_ids)
        return {agent_id: self.apply(skill, agent_id, scope) for agent_id in checked}

    def remove(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        """
        Remove a skill's projection for one agent.

        Returns:
            True if a projection was removed, False if none existed.

        Raises:
            UnknownAgentError: If agent_id is not in the registry.
        """
        self._registry.get(agent_id)
        store_module.validate_skill_name(skill_name)
        return self._strategy.remove(skill_name, agent_id, scope)

    def remove_all(self, skill_name: str, scope: Scope) -> list[str]:
        """
        Remove a skill's projection from every agent that has it.

        Returns:
            Ids of the agents it was removed from, in table order.
        """
        return [
            agent_id
            for agent_id in self._registry.ids()
            if self.remove(skill_name, agent_id, scope)
        ]

    def is_applied(self, skill_name: str, agent_id: str, scope: Scope) -> bool:
        """Whether one agent currently has the skill applied."""
        self._registry.get(agent_id)
        store_module.validate_skill_name(skill_name)
        return self._strategy.is_applied(skill_name, agent_id, scope)

    def status(self, skill_name: str, scope: Scope) -> set[str]:
        """
        Agents that currently have a skill applied at a scope.

        Only the name is needed, so this works for skills deleted after
        being applied.
        """
        store_module.validate_skill_name(skill_name)
        return {
            agent_id
            for agent_id in self._registry.ids()
            if self._strategy.is_applied(skill_name, agent_id, scope)
        }

"""
Agent descriptor table lookups.

The registry wraps the `agents:` table from the settings and is the only
place agent identifiers are validated. Every engine operation that takes
an agent id goes through `get()` before touching the filesystem.
"""

from __future__ import annotations

import collections.abc as _abc
import pathlib as _pathlib
import typing as _typing

import agent_skill_manager.config.types as types
import agent_skill_manager.errors as errors


class AgentRegistry:
    """
    Read-only view over the agent descriptor table.

    Agents keep the order of the table they were built from, which is
    the order used for detection and status reports.
    """

    def __init__(self, agents: _abc.Mapping[str, types.AgentConfig]) -> None:
        """
        Initialize the registry.

        Args:
            agents: Mapping of agent id to its path conventions.
        """
        self._agents: dict[str, types.AgentConfig] = dict(agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def ids(self) -> list[str]:
        """All agent ids in table order."""
        return list(self._agents)

    def list_agents(self) -> list[tuple[str, types.AgentConfig]]:
        """All (id, config) pairs in table order."""
        return list(self._agents.items())

    def get(self, agent_id: str) -> types.AgentConfig:
        """
        Look up an agent.

        Raises:
            UnknownAgentError: If agent_id is not in the table.
        """
        try:
            return self._agents[agent_id]
        except KeyError:
            raise errors.UnknownAgentError(agent_id, self._agents) from None

    def validate(self, agent_ids: _abc.Iterable[str]) -> list[str]:
        """
        Check every id against the table.

        Returns:
            The ids as a list, in the given order.

        Raises:
            UnknownAgentError: On the first id not in the table.
        """
        checked = list(agent_ids)
        for agent_id in checked:
            self.get(agent_id)
        return checked

    # Path conventions
    def local_config_path(self, repo_path: _pathlib.Path, agent_id: str) -> _pathlib.Path:
        """Config document of an agent inside a repository."""
        agent = self.get(agent_id)
        return repo_path / agent.config_dir / agent.config_file

    def global_config_path(self, agent_id: str) -> _pathlib.Path:
        """Per-user config document of an agent."""
        return self.get(agent_id).global_config_file

    def local_skills_dir(self, repo_path: _pathlib.Path, agent_id: str) -> _pathlib.Path:
        """Skills directory of an agent inside a repository."""
        agent = self.get(agent_id)
        assert agent.skills_dir is not None
        return repo_path / agent.skills_dir

    def global_skills_dir(self, agent_id: str) -> _pathlib.Path:
        """Per-user skills directory of an agent."""
        agent = self.get(agent_id)
        assert agent.global_skills_dir is not None
        return agent.global_skills_dir

    def detect(self, repo_path: _pathlib.Path) -> str | None:
        """
        Find the first agent configured in a repository.

        Returns:
            The id of the first agent (table order) whose config document
            exists under repo_path, or None.
        """
        for agent_id in self._agents:
            if self.local_config_path(repo_path, agent_id).exists():
                return agent_id
        return None

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            agent_id: agent.model_dump(mode="json")
            for agent_id, agent in self._agents.items()
        }

"""
Repository helpers: root detection, path validation and agent config init.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import agent_skill_manager.constants as constants
import agent_skill_manager.errors as errors

if _typing.TYPE_CHECKING:
    import agent_skill_manager.agents as _agents
    import agent_skill_manager.config.types as _types

_logger = _logging.getLogger(__name__)


def find_repo_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path | None:
    """
    Find the repository root from the given path or current directory.

    Walks upwards looking for a version-control marker (.git, .hg, .svn).

    Returns:
        The first directory containing a marker, or None.
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    current = start_path.resolve()
    for candidate in (current, *current.parents):
        for marker in constants.VCS_MARKERS:
            if (candidate / marker).exists():
                return candidate
    return None


def validate_repository_path(path: _pathlib.Path | str) -> _pathlib.Path:
    """
    Resolve a repository path and check that it is an existing directory.

    Raises:
        InvalidPathError: If the path does not exist or is not a directory.
    """
    resolved = _pathlib.Path(path).expanduser().resolve()
    if not resolved.is_dir():
        raise errors.InvalidPathError(resolved)
    return resolved


def render_agent_template(agent: _types.AgentConfig) -> str:
    """Render the starter config document written by `asm init`."""
    name = agent.display_name
    return f"""# {name} Configuration

This file contains instructions and context for {name} when working in this repository.

## Repository Structure

Add information about your project structure here.

## Development Guidelines

Add your coding standards and best practices here.

## Skills

Skills managed by Agent Skill Manager (asm) will be appended below.
"""


def init_agent_config(
    repo_path: _pathlib.Path | str,
    agent_id: str,
    registry: _agents.AgentRegistry,
) -> tuple[_pathlib.Path, bool]:
    """
    Create an agent's config document in a repository.

    Args:
        repo_path: Repository root.
        agent_id: Agent to initialize.
        registry: Agent descriptor table.

    Returns:
        Tuple of (config file path, created). created is False when the
        file already existed; an existing file is never modified.

    Raises:
        UnknownAgentError: If agent_id is not in the registry.
        InvalidPathError: If repo_path is not an existing directory.
    """
    agent = registry.get(agent_id)
    root = validate_repository_path(repo_path)
    config_file = registry.local_config_path(root, agent_id)

    if config_file.exists():
        return config_file, False

    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(render_agent_template(agent), encoding="utf-8")
    _logger.debug("Initialized %s config at %s", agent_id, config_file)
    return config_file, True

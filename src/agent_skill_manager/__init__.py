"""
Agent Skill Manager - author skills once, distribute them to every agent.

Skills are markdown documents with a small metadata header. asm keeps them
in a user store (with a read-only built-in store underneath) and projects
them into the configuration locations of AI coding assistants such as
Claude Code, Codex CLI, Gemini CLI and OpenCode.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("agent-skill-manager")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Agent Skill Manager Contributors"

from agent_skill_manager.config import Settings  # noqa: E402
from agent_skill_manager.skills import Skill, SkillDistributor, SkillStore  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "Settings",
    "Skill",
    "SkillDistributor",
    "SkillStore",
]

"""
Agent descriptor table.

Each supported AI coding assistant is described by an AgentConfig entry
(config directory, config file, global config file, skills directories).
The table comes from configuration, so new agents need no code changes.
"""

from agent_skill_manager.agents.registry import AgentRegistry

__all__ = ["AgentRegistry"]

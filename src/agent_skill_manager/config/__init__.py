"""
Configuration module for Agent Skill Manager.

Uses pydantic-settings for environment variable loading and layered
YAML files for the agent table.
"""

from agent_skill_manager.config.settings import Settings
from agent_skill_manager.config.sources import ConfigFileError
from agent_skill_manager.config.types import AgentConfig

__all__ = ["AgentConfig", "ConfigFileError", "Settings"]

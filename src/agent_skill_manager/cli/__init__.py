"""
CLI module for Agent Skill Manager.

Provides the command-line interface using Click.
"""

from agent_skill_manager.cli.main import cli, main

__all__ = ["main", "cli"]

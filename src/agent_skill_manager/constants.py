"""
Shared constants for Agent Skill Manager.

This module provides a single source of truth for file names, markers
and default values that are used across multiple modules.
"""

# Skill storage
SKILL_FILE_NAME = "SKILL.md"
"""Name of the skill document inside each per-skill directory."""

DEFAULT_USER_SKILLS_DIR = "~/.asm/skills"
"""User store location when ASM_SKILLS_DIR is not set."""

SKILL_NAME_MAX_LENGTH = 100
"""Longest accepted skill name (names double as directory names)."""

# Metadata codec
METADATA_MARKER = "---"
"""Line that opens and closes the metadata block of a skill document."""

DEFAULT_SKILL_CONTENT = "# {name}\n\nAdd your skill instructions here."
"""Body used by `asm add` when no --file is given."""

# Inline merge projection
SECTION_START = "<!-- Skill: {name} -->"
"""Opening delimiter of a skill section inside an agent config document."""

SECTION_END = "<!-- End Skill: {name} -->"
"""Closing delimiter of a skill section inside an agent config document."""

# Agent defaults
DEFAULT_GLOBAL_AGENT = "claude-code"
"""Agent used by `asm apply --global` when --agent is omitted."""

DEFAULT_INIT_AGENT = "claude-code"
"""Agent initialized by `asm init` when --agent is omitted."""

# Repository detection
VCS_MARKERS = (".git", ".hg", ".svn")
"""Directory entries that mark a repository root."""

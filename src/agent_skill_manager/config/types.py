"""Configuration type definitions for Agent Skill Manager settings.

This module defines the Pydantic models nested within the main Settings
class:

- AgentConfig: per-agent path conventions (the agent descriptor table)

Design decision: All types use `extra="allow"` to preserve unknown fields,
so a newer config file does not fail on an older install. Unknown
fields are available through pydantic's `model_extra`.
"""

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic

# =============================================================================
# Base class
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    All config types use `extra="allow"` so unknown fields are preserved
    rather than silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")


# =============================================================================
# Agent Descriptors
# =============================================================================


class AgentConfig(ConfigBase):
    """
    Path conventions of one AI coding assistant.

    YAML section: agents.<agent-id>.*

    Local paths are relative to a repository root. Global paths are
    absolute after validation (a leading ~ is expanded).
    """

    display_name: str = _pydantic.Field(..., min_length=1)
    """Human readable name (e.g. "Claude Code")."""

    config_dir: str = _pydantic.Field(..., min_length=1)
    """Repository-relative config directory (e.g. ".claude")."""

    config_file: str = _pydantic.Field(..., min_length=1)
    """Config document inside config_dir (e.g. "CLAUDE.md")."""

    global_config_file: _pathlib.Path
    """Per-user config document (e.g. ~/.claude/CLAUDE.md)."""

    skills_dir: str | None = None
    """Repository-relative skills directory; defaults to <config_dir>/skills."""

    global_skills_dir: _pathlib.Path | None = None
    """Per-user skills directory; defaults to <global config dir>/skills."""

    @_pydantic.field_validator("global_config_file", "global_skills_dir", mode="before")
    @classmethod
    def _expand_user(cls, value: _typing.Any) -> _typing.Any:
        """Expand ~ in global paths."""
        if value is None:
            return value
        return _pathlib.Path(value).expanduser()

    @_pydantic.model_validator(mode="after")
    def _fill_skills_dirs(self) -> "AgentConfig":
        """Derive skills directories from the config locations when unset."""
        if self.skills_dir is None:
            self.skills_dir = f"{self.config_dir}/skills"
        if self.global_skills_dir is None:
            self.global_skills_dir = self.global_config_file.parent / "skills"
        return self

    @property
    def local_config_path(self) -> _pathlib.PurePosixPath:
        """Repository-relative path of the config document."""
        return _pathlib.PurePosixPath(self.config_dir) / self.config_file

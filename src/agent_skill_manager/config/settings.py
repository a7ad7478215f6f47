"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with ASM_ prefix
3. .env file (only when ASM_ENV_FILE points at one)
4. Layered YAML config files:
   - Project config: <repo>/.asm/config.yaml (highest)
   - User config: ~/.config/asm/config.yaml
   - Built-in defaults: bundled defaults/config.yaml (lowest)

Examples:
  ASM_SKILLS_DIR=~/my-skills
  ASM_DISTRIBUTION=link
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import agent_skill_manager.builtin_skills as builtin_skills
import agent_skill_manager.config.sources as sources
import agent_skill_manager.config.types as types
import agent_skill_manager.constants as constants
import agent_skill_manager.repo as repo


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only ASM_ENV_FILE is honoured; a .env in the working directory is
    never picked up implicitly because asm runs inside arbitrary
    repositories whose .env files belong to someone else.
    """
    if env_file := _os.environ.get("ASM_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    Agent Skill Manager configuration settings.

    All settings can be overridden via environment variables with ASM_ prefix.
    Nested values use a double underscore delimiter (ASM_SECTION__KEY).

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (ASM_*)
    3. .env file
    4. Project config (.asm/config.yaml)
    5. User config (~/.config/asm/config.yaml)
    6. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="ASM_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args) - highest
        2. env_settings (ASM_* env vars)
        3. dotenv_settings (.env file)
        4. yaml_settings (layered config.yaml files)
        5. (defaults via Field definitions) - lowest
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, repo.find_repo_root()),
            file_secret_settings,
        )

    # =========================================================================
    # Config version (for future migrations)
    # =========================================================================

    version: int = _pydantic.Field(default=1, description="Config schema version")

    # =========================================================================
    # Skill stores
    # =========================================================================

    skills_dir: _pathlib.Path | None = _pydantic.Field(
        default=None,
        description="User skill store root (ASM_SKILLS_DIR); defaults to ~/.asm/skills",
    )

    builtin_skills_dir: _pathlib.Path | None = _pydantic.Field(
        default=None,
        description="Built-in skill store root; defaults to the bundled skills",
    )

    # =========================================================================
    # Distribution
    # =========================================================================

    distribution: _typing.Literal["merge", "link"] = _pydantic.Field(
        default="merge",
        description="Projection strategy: inline merge or directory symlink",
    )

    global_agent: str = _pydantic.Field(
        default=constants.DEFAULT_GLOBAL_AGENT,
        description="Agent used by 'apply --global' when --agent is omitted",
    )

    default_agents: list[str] = _pydantic.Field(
        default_factory=list,
        description="Agents stamped on new skills; empty means all agents",
    )

    agents: dict[str, types.AgentConfig] = _pydantic.Field(default_factory=dict)
    """Agent descriptor table (agent id -> path conventions)."""

    verbose: bool = _pydantic.Field(default=False, description="Enable debug logging")

    @_pydantic.field_validator("skills_dir", "builtin_skills_dir", mode="after")
    @classmethod
    def _expand_store_dir(cls, value: _pathlib.Path | None) -> _pathlib.Path | None:
        """Expand ~ in store locations."""
        return value.expanduser() if value is not None else None

    # =========================================================================
    # Derived locations
    # =========================================================================

    @property
    def user_skills_dir(self) -> _pathlib.Path:
        """Resolved user store root."""
        if self.skills_dir is not None:
            return self.skills_dir
        return _pathlib.Path(constants.DEFAULT_USER_SKILLS_DIR).expanduser()

    @property
    def builtin_skills_path(self) -> _pathlib.Path:
        """Resolved built-in store root."""
        if self.builtin_skills_dir is not None:
            return self.builtin_skills_dir
        return builtin_skills.get_builtin_skills_path()

    def get_default_agents(self) -> list[str]:
        """Agents stamped on a new skill when none are given."""
        return list(self.default_agents) or list(self.agents)

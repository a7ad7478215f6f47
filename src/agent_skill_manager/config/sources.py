"""Custom pydantic-settings sources for Agent Skill Manager configuration.

This module provides:

- LayeredYamlSettingsSource: A pydantic-settings source that loads
  configuration from layered YAML files and deep-merges them.

Configuration layers (in precedence order, highest first):
1. Environment variables (handled by pydantic-settings)
2. Project config: .asm/config.yaml in the repository root
3. User config: ~/.config/asm/config.yaml (or ASM_CONFIG_DIR)
4. Built-in defaults: bundled config.yaml

Nested mappings merge key by key (so a user config can add one agent
without restating the others); any other value overrides.

Environment variables:
- ASM_CONFIG_DIR: Override user config directory (default: ~/.config/asm)
"""

import collections.abc as _abc
import copy as _copy
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "ASM_CONFIG_DIR"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def deep_merge(
    base: _abc.Mapping[str, _typing.Any],
    override: _abc.Mapping[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Merge two config mappings, override winning.

    Mappings present on both sides are merged recursively; any other value
    from `override` replaces the one in `base`. Neither input is modified.
    """
    result: dict[str, _typing.Any] = _copy.deepcopy(dict(base))
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, _abc.Mapping) and isinstance(value, _abc.Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = _copy.deepcopy(value)
    return result


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads from layered YAML config files.

    Layers (lowest to highest precedence):
    1. Built-in defaults (src/agent_skill_manager/config/defaults/config.yaml)
    2. User config (~/.config/asm/config.yaml)
    3. Project config (<repo>/.asm/config.yaml)
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
        builtin_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Optional repository root for project-level config.
            user_config_path: Override path for user config file (for testing).
            builtin_config_path: Override path for builtin defaults (for testing).
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._builtin_config_path = builtin_config_path
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        """Load every config layer and merge them in precedence order."""
        # Built-in defaults are REQUIRED: missing or empty means a broken install.
        builtin_path = self._builtin_config_path or get_builtin_defaults_path()
        if not builtin_path.exists():
            raise ConfigFileError(
                builtin_path,
                "built-in defaults not found (possible installation problem)",
            )
        merged = self._load_yaml_file(builtin_path)
        if not merged:
            raise ConfigFileError(
                builtin_path,
                "built-in defaults file is empty (possible installation problem)",
            )

        optional_layers = [self._user_config_path or get_user_config_path()]
        if self._project_root is not None:
            optional_layers.append(get_project_config_path(self._project_root))

        for path in optional_layers:
            if not path.exists():
                continue
            content = self._load_yaml_file(path)
            if content:
                merged = deep_merge(merged, content)

        return merged

    def _load_yaml_file(self, path: _pathlib.Path) -> dict[str, _typing.Any] | None:
        """
        Load a YAML file and return its contents as a dict.

        Returns:
            Parsed YAML contents, or None if file is empty.

        Raises:
            ConfigFileError: If the file cannot be read, is malformed YAML,
                or contains non-dict content at the top level.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigFileError(path, f"cannot read file: {e}") from e

        try:
            parsed = _yaml.safe_load(content)
        except _yaml.YAMLError as e:
            raise ConfigFileError(path, f"invalid YAML: {e}") from e

        if parsed is None:
            return None

        if not isinstance(parsed, dict):
            type_name = type(parsed).__name__
            raise ConfigFileError(
                path,
                f"config must be a YAML mapping (dict), got {type_name}",
            )

        return parsed

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """Get value for a field from the merged config."""
        value = self._merged.get(field_name)
        if value is None:
            return None, field_name, False
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return merged config as a plain dict for Pydantic validation."""
        return _copy.deepcopy(self._merged)


def get_builtin_defaults_path() -> _pathlib.Path:
    """Get the path to the built-in defaults config file."""
    return _pathlib.Path(__file__).parent / "defaults" / "config.yaml"


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects ASM_CONFIG_DIR environment variable if set,
    otherwise uses XDG standard path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "asm"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / "config.yaml"


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Get the path to the project config file (.asm/config.yaml)."""
    return project_root / ".asm" / "config.yaml"

"""
Error types raised by the skill store and distribution engine.

Every error carries the message shown to the user; the CLI prints it
verbatim. Filesystem failures are not wrapped - OSError propagates as is.
"""

from __future__ import annotations

import typing as _typing


class SkillManagerError(Exception):
    """Base class for all Agent Skill Manager errors."""

    pass


class SkillNotFoundError(SkillManagerError, LookupError):
    """Raised when a skill name is absent from every applicable store."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Skill '{name}' not found.")


class SkillExistsError(SkillManagerError):
    """Raised when creating a skill whose name is already taken."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Skill '{name}' already exists. Use a different name or remove it first."
        )


class ProtectedSkillError(SkillManagerError):
    """Raised when deleting a skill that only exists in the built-in store."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Cannot delete built-in skill '{name}'. "
            "Built-in skills are not user-deletable."
        )


class UnknownAgentError(SkillManagerError, ValueError):
    """Raised when an agent identifier is not in the agent table."""

    def __init__(self, agent_id: str, valid: _typing.Iterable[str]) -> None:
        self.agent_id = agent_id
        self.valid = list(valid)
        super().__init__(
            f"Invalid agent type: {agent_id}. Valid types: {', '.join(self.valid)}"
        )


class InvalidPathError(SkillManagerError, ValueError):
    """Raised when a repository path does not exist or is not a directory."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Invalid repository path: {path}")


class ProjectionConflictError(SkillManagerError):
    """Raised when a link destination is occupied by something asm did not create."""

    def __init__(self, name: str, path: object) -> None:
        self.name = name
        self.path = path
        super().__init__(
            f"Cannot link skill '{name}': {path} already exists and is not a link. "
            "Move it away or apply with distribution: merge."
        )


class InvalidSkillNameError(SkillManagerError, ValueError):
    """Raised when a skill name cannot be used as a directory name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Invalid skill name: '{name}'. Skill names must start with a letter "
            "or digit and contain only letters, digits, '.', '_' or '-' (max 100 chars)."
        )

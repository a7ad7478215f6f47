"""
Skill storage across the user store and the built-in store.

Layout (both stores):

    <store root>/<skill name>/SKILL.md

The user store is writable and takes precedence; the built-in store is
read-only and only visible where the user store has no skill of the same
name. The two directories are never merged on disk.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import re as _re
import shutil as _shutil
import typing as _typing

import agent_skill_manager.constants as constants
import agent_skill_manager.errors as errors
import agent_skill_manager.skills.skill as skill_module

_logger = _logging.getLogger(__name__)

_SKILL_NAME_RE = _re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

SkillSource = _typing.Literal["user", "builtin"]


def validate_skill_name(name: str) -> str:
    """Validate a skill name to prevent path traversal out of the stores.

    Names become directory names, so they may only contain letters,
    digits, '.', '_' and '-', must start with a letter or digit and are
    limited to 100 characters. This rejects '..', '/' and '\\'.

    Returns:
        The validated name (unchanged if valid).

    Raises:
        InvalidSkillNameError: If the name is not usable.
    """
    if len(name) > constants.SKILL_NAME_MAX_LENGTH or not _SKILL_NAME_RE.match(name):
        raise errors.InvalidSkillNameError(name)
    return name


class SkillStore:
    """
    Durable skill persistence with user-over-builtin precedence.

    The store is the only component that writes skill documents. Writes
    always go to the user store; the built-in store is never modified.
    """

    def __init__(
        self,
        user_dir: _pathlib.Path,
        builtin_dir: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            user_dir: Writable user store root (created on first save).
            builtin_dir: Read-only built-in store root, if any.
        """
        self._user_dir = user_dir
        self._builtin_dir = builtin_dir

    @property
    def user_dir(self) -> _pathlib.Path:
        """User store root."""
        return self._user_dir

    @property
    def builtin_dir(self) -> _pathlib.Path | None:
        """Built-in store root."""
        return self._builtin_dir

    # Path resolution
    def user_skill_file(self, name: str) -> _pathlib.Path:
        """Path of a skill's document in the user store (may not exist)."""
        return self._user_dir / validate_skill_name(name) / constants.SKILL_FILE_NAME

    def _builtin_skill_file(self, name: str) -> _pathlib.Path | None:
        if self._builtin_dir is None:
            return None
        return self._builtin_dir / name / constants.SKILL_FILE_NAME

    def source_of(self, name: str) -> SkillSource | None:
        """
        Which store a name resolves to.

        Returns:
            "user", "builtin", or None when the name is in neither store.
        """
        if self.user_skill_file(name).is_file():
            return "user"
        builtin_file = self._builtin_skill_file(name)
        if builtin_file is not None and builtin_file.is_file():
            return "builtin"
        return None

    def skill_file(self, name: str) -> _pathlib.Path | None:
        """Resolved SKILL.md path (user store wins), or None."""
        source = self.source_of(name)
        if source == "user":
            return self.user_skill_file(name)
        if source == "builtin":
            return self._builtin_skill_file(name)
        return None

    def skill_dir(self, name: str) -> _pathlib.Path | None:
        """Resolved skill directory (user store wins), or None."""
        skill_file = self.skill_file(name)
        return skill_file.parent if skill_file is not None else None

    @staticmethod
    def _decode(name: str, document: str) -> skill_module.Skill:
        """Decode a stored document; the directory name is the skill's identity."""
        skill = skill_module.decode_skill(name, document)
        if skill.name != name:
            _logger.warning(
                "Skill %s declares name %r; using the directory name", name, skill.name
            )
            skill.name = name
        return skill

    # CRUD
    def exists(self, name: str) -> bool:
        """Check if a skill exists in either store (user checked first)."""
        return self.source_of(name) is not None

    def save(self, skill: skill_module.Skill) -> skill_module.Skill:
        """
        Write a skill to the user store, overwriting any previous version.

        updated_at is refreshed on every save. When the user store already
        holds a record of that name its created_at is kept.

        Returns:
            The skill as written.
        """
        skill_file = self.user_skill_file(skill.name)
        saved = skill.touch()

        if skill_file.is_file():
            previous = self._decode(skill.name, skill_file.read_text(encoding="utf-8"))
            saved.created_at = previous.created_at

        skill_file.parent.mkdir(parents=True, exist_ok=True)
        skill_file.write_text(skill_module.encode_skill(saved), encoding="utf-8")
        _logger.debug("Saved skill %s to %s", skill.name, skill_file)
        return saved

    def create(self, skill: skill_module.Skill) -> skill_module.Skill:
        """
        Save a skill that must not exist yet.

        Raises:
            SkillExistsError: If the name exists in either store.
        """
        if self.exists(skill.name):
            raise errors.SkillExistsError(skill.name)
        return self.save(skill)

    def load(self, name: str) -> skill_module.Skill | None:
        """
        Load a skill by name (user store wins).

        Returns:
            The decoded Skill, or None if absent from both stores.
        """
        skill_file = self.skill_file(name)
        if skill_file is None:
            return None
        return self._decode(name, skill_file.read_text(encoding="utf-8"))

    def get(self, name: str) -> skill_module.Skill:
        """
        Load a skill that must exist.

        Raises:
            SkillNotFoundError: If absent from both stores.
        """
        skill = self.load(name)
        if skill is None:
            raise errors.SkillNotFoundError(name)
        return skill

    def list(
        self,
        *,
        tag: str | None = None,
        agent: str | None = None,
    ) -> list[skill_module.Skill]:
        """
        List all skills, user store first, sorted by name.

        Built-in skills shadowed by a user skill of the same name are
        omitted. Entries that cannot be read are logged and skipped.

        Args:
            tag: Only include skills carrying this tag.
            agent: Only include skills intended for this agent.

        Returns:
            One Skill per name.
        """
        found: dict[str, skill_module.Skill] = {}

        for root in (self._user_dir, self._builtin_dir):
            for name, skill_file in self._iter_store(root):
                if name in found:
                    continue
                try:
                    document = skill_file.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    _logger.warning("Skipping unreadable skill %s: %s", skill_file, e)
                    continue
                found[name] = self._decode(name, document)

        skills = [found[name] for name in sorted(found)]
        if tag is not None:
            skills = [s for s in skills if tag in s.tags]
        if agent is not None:
            skills = [s for s in skills if agent in s.agents]
        return skills

    def _iter_store(
        self,
        root: _pathlib.Path | None,
    ) -> _typing.Iterator[tuple[str, _pathlib.Path]]:
        """Yield (name, SKILL.md path) for each skill directory under root."""
        if root is None or not root.is_dir():
            return
        for entry in sorted(root.iterdir()):
            if not entry.is_dir() or not _SKILL_NAME_RE.match(entry.name):
                continue
            skill_file = entry / constants.SKILL_FILE_NAME
            if skill_file.is_file():
                yield entry.name, skill_file

    def delete(self, name: str) -> bool:
        """
        Delete a skill from the user store.

        Returns:
            True if the user-store directory was removed, False if the
            name is in neither store.

        Raises:
            ProtectedSkillError: If the skill only exists in the built-in store.
        """
        skill_dir = self._user_dir / validate_skill_name(name)
        if skill_dir.is_dir():
            _shutil.rmtree(skill_dir)
            _logger.debug("Deleted skill %s from %s", name, skill_dir)
            return True

        if self.source_of(name) == "builtin":
            raise errors.ProtectedSkillError(name)
        return False

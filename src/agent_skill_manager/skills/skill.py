"""
Skill definition and SKILL.md encoding.

A skill document is a metadata block delimited by `---` lines followed by
the skill body:

    ---
    name: review-checklist
    description: Checklist for reviewing pull requests
    tags: review, quality
    agents: claude-code
    createdAt: 2026-01-15T10:00:00+00:00
    updatedAt: 2026-01-15T10:00:00+00:00
    ---

    # Review Checklist
    ...

Metadata lines are `key: value` pairs split on the first colon only, so
values such as timestamps may contain colons. Unknown keys are dropped.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import datetime as _datetime
import re as _re
import typing as _typing

import agent_skill_manager.constants as constants

# Metadata block followed by the body. The body group is optional so a
# document ending right after the closing marker still matches.
_DOCUMENT_RE = _re.compile(
    r"^---[ \t]*\n(.*?)\n---[ \t]*(?:\n(.*))?$",
    _re.DOTALL,
)


def utc_now() -> str:
    """Current time as an ISO-8601 UTC timestamp."""
    return _datetime.datetime.now(_datetime.UTC).isoformat()


@_dataclasses.dataclass
class Skill:
    """
    A named, reusable instruction document for AI coding assistants.

    Attributes:
        name: Unique identifier, also the on-disk directory name
        description: Short free-text summary
        content: Instruction body (markdown, not parsed further)
        tags: Free-text labels, in insertion order
        agents: Agent ids the skill is intended for (a default/filter)
        created_at: ISO timestamp of creation
        updated_at: ISO timestamp of the last content-modifying save
    """

    name: str
    description: str = ""
    content: str = ""
    tags: list[str] = _dataclasses.field(default_factory=list)
    agents: list[str] = _dataclasses.field(default_factory=list)
    created_at: str = _dataclasses.field(default_factory=utc_now)
    updated_at: str = _dataclasses.field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        name: str,
        *,
        description: str = "",
        content: str = "",
        tags: _typing.Iterable[str] = (),
        agents: _typing.Iterable[str] = (),
    ) -> Skill:
        """Create a new skill with both timestamps set to now."""
        now = utc_now()
        return cls(
            name=name,
            description=description,
            content=content,
            tags=list(tags),
            agents=list(agents),
            created_at=now,
            updated_at=now,
        )

    def touch(self) -> Skill:
        """Return a copy with a refreshed updated_at."""
        return _dataclasses.replace(
            self,
            tags=list(self.tags),
            agents=list(self.agents),
            updated_at=utc_now(),
        )

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "content": self.content,
            "tags": list(self.tags),
            "agents": list(self.agents),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def encode_skill(skill: Skill) -> str:
    """
    Serialize a skill to a SKILL.md document.

    tags and agents lines are only written when non-empty.
    """
    lines = [
        constants.METADATA_MARKER,
        f"name: {skill.name}",
        f"description: {skill.description}",
    ]
    if skill.tags:
        lines.append(f"tags: {', '.join(skill.tags)}")
    if skill.agents:
        lines.append(f"agents: {', '.join(skill.agents)}")
    lines.append(f"createdAt: {skill.created_at}")
    lines.append(f"updatedAt: {skill.updated_at}")
    lines.append(constants.METADATA_MARKER)

    return "\n".join(lines) + f"\n\n{skill.content}\n"


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_metadata(block: str) -> dict[str, str]:
    """
    Parse `key: value` lines of a metadata block.

    Each line is split on its first colon; lines without a colon or with
    an empty key are ignored. Later duplicates win.
    """
    metadata: dict[str, str] = {}
    for line in block.split("\n"):
        key, sep, value = line.partition(":")
        key = key.strip()
        if sep and key:
            metadata[key] = value.strip()
    return metadata


def decode_skill(name: str, document: str) -> Skill:
    """
    Parse a SKILL.md document.

    Never fails: a document without a metadata block is treated as a bare
    body (legacy or foreign file) with empty metadata and fresh timestamps.

    Args:
        name: Skill name to use when the document does not carry one
              (normally the directory name).
        document: Raw document text.

    Returns:
        The decoded Skill.
    """
    text = document.replace("\r\n", "\n")
    match = _DOCUMENT_RE.match(text)

    if not match:
        now = utc_now()
        return Skill(
            name=name,
            content=text.strip(),
            created_at=now,
            updated_at=now,
        )

    metadata = parse_metadata(match.group(1))
    body = (match.group(2) or "").strip()
    now = utc_now()

    return Skill(
        name=metadata.get("name") or name,
        description=metadata.get("description", ""),
        content=body,
        tags=_split_list(metadata.get("tags", "")),
        agents=_split_list(metadata.get("agents", "")),
        created_at=metadata.get("createdAt") or now,
        updated_at=metadata.get("updatedAt") or now,
    )

"""
Skill storage and distribution.

Skills are markdown documents with a metadata block. They live in one of
two stores (in priority order):
1. ~/.asm/skills/ (or $ASM_SKILLS_DIR) - User skills, writable
2. Bundled builtin_skills/ - Built-in skills, read-only

The distributor projects a skill into an agent's config location, either
globally for the user or for a single repository.
"""

from agent_skill_manager.skills.distribution import (
    InlineMergeStrategy,
    LinkStrategy,
    ProjectionStrategy,
    Scope,
    SkillDistributor,
    create_strategy,
)
from agent_skill_manager.skills.skill import (
    Skill,
    decode_skill,
    encode_skill,
    parse_metadata,
)
from agent_skill_manager.skills.store import (
    SkillStore,
    validate_skill_name,
)

__all__ = [
    # Core
    "Skill",
    # Codec
    "decode_skill",
    "encode_skill",
    "parse_metadata",
    # Store
    "SkillStore",
    "validate_skill_name",
    # Distribution
    "InlineMergeStrategy",
    "LinkStrategy",
    "ProjectionStrategy",
    "Scope",
    "SkillDistributor",
    "create_strategy",
]

"""
Builtin skills that ship with asm.

These skills are always visible in listings and can be applied like any
other skill. They have the lowest priority - a user skill with the same
name shadows them - and they are never modified or deleted by asm.
"""

import pathlib as _pathlib


def get_builtin_skills_path() -> _pathlib.Path:
    """Get the path to builtin skills directory."""
    return _pathlib.Path(__file__).parent

"""Module sequences - positional and dependency-aware iteration."""

from .cursor import IterableCursor, ListCursor, ModuleCursor, normalize_source
from .dependency import DependencyModuleSequence, SequenceState
from .positional import ModuleSequence

__all__ = [
    "ModuleCursor",
    "ListCursor",
    "IterableCursor",
    "normalize_source",
    "ModuleSequence",
    "DependencyModuleSequence",
    "SequenceState",
]

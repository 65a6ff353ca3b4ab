"""Module Sequencer - serve modules in dependency order."""

from .config import SequencerConfig
from .models import Module, ModuleInterface
from .sequence import DependencyModuleSequence, ModuleSequence

__version__ = "0.1.0"
__all__ = [
    "Module",
    "ModuleInterface",
    "ModuleSequence",
    "DependencyModuleSequence",
    "SequencerConfig",
]

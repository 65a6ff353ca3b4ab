"""Data models for the module sequencer."""

from .manifest import ModuleEntry, ModuleManifest, load_manifest, parse_manifest
from .module import Module, ModuleInterface, is_module

__all__ = [
    # Modules
    "Module",
    "ModuleInterface",
    "is_module",
    # Manifests
    "ModuleEntry",
    "ModuleManifest",
    "load_manifest",
    "parse_manifest",
]

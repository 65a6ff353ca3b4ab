"""Utility functions and exceptions."""

from .exceptions import (
    ConfigurationError,
    DuplicateModuleKeyError,
    ManifestError,
    SequencerError,
    UnknownDependencyError,
)

__all__ = [
    "SequencerError",
    "ConfigurationError",
    "ManifestError",
    "DuplicateModuleKeyError",
    "UnknownDependencyError",
]

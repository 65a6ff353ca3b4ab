"""Custom exceptions for the module sequencer.

Exception Hierarchy:
-------------------
SequencerError (base)
├── ConfigurationError          # Invalid config file or environment values
└── ManifestError               # Manifest document could not be loaded
    ├── DuplicateModuleKeyError # Two manifest entries share a key
    └── UnknownDependencyError  # Dependency key names no declared module

Usage Guidelines:
----------------
1. The sequencing core never raises these. Out-of-range positions and
   missing keys return None, malformed dependency entries are skipped and
   dependency cycles are resolved deterministically.

2. Manifest and configuration loading raise them so that the CLI can report
   a readable message and exit non-zero.

3. Use SequencerError as catch-all for sequencer-specific errors.
"""

from pathlib import Path


class SequencerError(Exception):
    """Base exception for all sequencer errors."""

    pass


class ConfigurationError(SequencerError):
    """Raised when a configuration source is invalid."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        """
        Initialize ConfigurationError.

        Args:
            message: Error message.
            path: Optional path of the offending config file.
        """
        super().__init__(message)
        self.path = path


class ManifestError(SequencerError):
    """Raised when a module manifest cannot be loaded or built."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        """
        Initialize ManifestError.

        Args:
            message: Error message.
            path: Optional path of the manifest file.
        """
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        """
        Return string representation with the manifest path if available.

        Returns:
            str: Error message prefixed with the manifest path if set.
        """
        message = str(self.args[0]) if self.args else "Invalid manifest"
        if self.path:
            return f"{self.path}: {message}"
        return message


class DuplicateModuleKeyError(ManifestError):
    """Raised when two manifest entries declare the same module key."""

    def __init__(self, key: str, path: Path | None = None) -> None:
        """
        Initialize DuplicateModuleKeyError.

        Args:
            key: The duplicated module key.
            path: Optional path of the manifest file.
        """
        super().__init__(f"Duplicate module key: {key}", path=path)
        self.key = key


class UnknownDependencyError(ManifestError):
    """Raised in strict mode when a dependency key names no declared module."""

    def __init__(self, module_key: str, dependency_key: str, path: Path | None = None) -> None:
        """
        Initialize UnknownDependencyError.

        Args:
            module_key: Key of the module declaring the dependency.
            dependency_key: The dependency key that could not be found.
            path: Optional path of the manifest file.
        """
        super().__init__(
            f"Module '{module_key}' depends on unknown module '{dependency_key}'", path=path
        )
        self.module_key = module_key
        self.dependency_key = dependency_key

"""Module manifests - declarative module lists validated with Pydantic.

A manifest lists modules in declaration order and names their dependencies
by key:

    modules:
      - key: core
      - key: http
        dependencies: [core, cache]
      - key: cache
        metadata:
          description: In-memory cache

Building a manifest links dependency keys to the Module objects created for
the other entries.
"""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..utils.exceptions import DuplicateModuleKeyError, ManifestError, UnknownDependencyError
from .module import Module

logger = structlog.get_logger(__name__)


class ModuleEntry(BaseModel):
    """One module declared in a manifest."""

    key: str = Field(..., min_length=1, description="Unique module key")
    dependencies: list[str] = Field(
        default_factory=list, description="Keys of required modules, in order"
    )
    metadata: dict[str, Any] = Field(default_factory=dict, description="Free-form module data")

    model_config = {"extra": "forbid"}

    @field_validator("key")
    @classmethod
    def strip_key(cls, v: str) -> str:
        """Reject keys made only of whitespace."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Module key cannot be blank")
        return stripped

    @field_validator("dependencies")
    @classmethod
    def strip_dependencies(cls, v: list[str]) -> list[str]:
        """Strip dependency keys and drop blank ones."""
        return [dep.strip() for dep in v if dep.strip()]


class ModuleManifest(BaseModel):
    """A list of module declarations in declaration order."""

    modules: list[ModuleEntry] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def check_unique_keys(self) -> "ModuleManifest":
        """Reject manifests declaring the same key twice."""
        seen: set[str] = set()
        for entry in self.modules:
            if entry.key in seen:
                raise DuplicateModuleKeyError(entry.key)
            seen.add(entry.key)
        return self

    @property
    def keys(self) -> list[str]:
        """Declared module keys, in order."""
        return [entry.key for entry in self.modules]

    def unknown_dependencies(self) -> list[tuple[str, str]]:
        """
        Find dependency keys that name no declared module.

        Returns:
            (module key, dependency key) pairs in declaration order
        """
        known = set(self.keys)
        return [
            (entry.key, dep)
            for entry in self.modules
            for dep in entry.dependencies
            if dep not in known
        ]

    def build_modules(self, strict: bool = False) -> list[Module]:
        """
        Create linked Module objects for every entry.

        Args:
            strict: Raise on unknown dependency keys instead of dropping them

        Returns:
            Modules in declaration order

        Raises:
            UnknownDependencyError: In strict mode, for the first unknown key
        """
        modules = {
            entry.key: Module(key=entry.key, metadata=dict(entry.metadata))
            for entry in self.modules
        }

        for entry in self.modules:
            module = modules[entry.key]
            for dep_key in entry.dependencies:
                dependency = modules.get(dep_key)
                if dependency is None:
                    if strict:
                        raise UnknownDependencyError(entry.key, dep_key)
                    logger.warning(
                        "Dropping unknown dependency", module=entry.key, dependency=dep_key
                    )
                    continue
                module.depends_on(dependency)

        logger.debug("Manifest modules built", module_count=len(modules))
        return list(modules.values())


def parse_manifest(data: Any, path: Path | None = None) -> ModuleManifest:
    """
    Validate raw manifest data.

    A bare list is accepted as the module list.

    Args:
        data: Decoded YAML/JSON document
        path: Optional source path, used in error messages

    Returns:
        Validated manifest

    Raises:
        ManifestError: If the document is not a valid manifest
    """
    if data is None:
        data = {}
    if isinstance(data, list):
        data = {"modules": data}
    if not isinstance(data, dict):
        raise ManifestError(
            f"Expected a mapping or a list of modules, got {type(data).__name__}", path=path
        )

    try:
        return ModuleManifest.model_validate(data)
    except DuplicateModuleKeyError as e:
        raise DuplicateModuleKeyError(e.key, path=path) from e
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest: {e}", path=path) from e


def load_manifest(path: Path) -> ModuleManifest:
    """
    Load a manifest from a YAML or JSON file.

    Files ending in ``.json`` are decoded as JSON, everything else as YAML.

    Args:
        path: Manifest file path

    Returns:
        Validated manifest

    Raises:
        FileNotFoundError: If the file doesn't exist
        ManifestError: If the file cannot be decoded or validated
    """
    if not path.exists():
        raise FileNotFoundError(f"Manifest file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ManifestError(f"Could not decode manifest: {e}", path=path) from e

    manifest = parse_manifest(data, path=path)
    logger.info("Manifest loaded", path=str(path), module_count=len(manifest.modules))
    return manifest

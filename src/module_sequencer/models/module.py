"""Module types served by the sequences."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol


class ModuleInterface(Protocol):
    """Protocol for modules that can be sequenced.

    A module is identified by a key that is unique within one iteration
    session, and declares an ordered list of the modules it depends on.
    The list may be empty and may contain cycles back to ancestors.
    """

    @property
    def key(self) -> str:
        """Unique module key."""
        ...

    @property
    def dependencies(self) -> Sequence["ModuleInterface"]:
        """Modules that must be served before this one, in declaration order."""
        ...


@dataclass(eq=False)
class Module:
    """
    Plain module implementation.

    Attributes:
        key: Unique module key
        dependencies: Modules this module depends on, in declaration order
        metadata: Free-form data carried along for the host application

    Modules compare by identity, two instances with the same key are
    distinct objects.
    """

    key: str
    dependencies: list[Any] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def depends_on(self, *modules: Any) -> "Module":
        """
        Append dependencies to this module.

        Args:
            *modules: Modules to depend on, in order

        Returns:
            This module, for chaining
        """
        self.dependencies.extend(modules)
        return self

    def __repr__(self) -> str:
        dependency_keys = [dep.key if is_module(dep) else repr(dep) for dep in self.dependencies]
        return f"Module(key={self.key!r}, dependencies={dependency_keys!r})"


def is_module(candidate: Any) -> bool:
    """
    Check whether a value can be treated as a module reference.

    Dependency lists may contain arbitrary values; only objects exposing a
    string ``key`` are proper module references.

    Args:
        candidate: Value to check

    Returns:
        True if the value can be tracked by key
    """
    return isinstance(getattr(candidate, "key", None), str)

"""Dependency-Aware Module Sequence - serves dependencies before dependents.

The sequence wraps a source cursor and reorders what it exposes as current:
whenever the next unserved source module has unserved dependencies, the
deepest of them is served first. Nothing is computed up front; each advance
resolves only the next module to serve, against the modules served so far.

Cycles are not errors. While descending, every visited module is recorded in
an ignore set and never descended into again, so for "A requires B, B
requires A" with A reached first, B is served before A.
"""

from collections.abc import Callable, Iterator, Mapping, Sequence
from enum import Enum
from typing import Any

import structlog

from ..models.module import ModuleInterface, is_module
from .cursor import ModuleCursor, normalize_source

logger = structlog.get_logger(__name__)

DependencyAccessor = Callable[[Any], Sequence[Any]]


class SequenceState(str, Enum):
    """Iteration state of a dependency-aware sequence."""

    UNSTARTED = "unstarted"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


class DependencyModuleSequence:
    """
    Lazy module sequence in which dependencies precede their dependents.

    No module is served twice within one pass. Served modules are tracked by
    key, so two distinct objects sharing a key count as the same module.

    Usage:
        sequence = DependencyModuleSequence([one, two, three])
        for module in sequence:
            load(module)

    Or driven explicitly:
        sequence.reset()
        while sequence.is_valid():
            load(sequence.current())
            sequence.advance()
    """

    def __init__(
        self,
        source: Any,
        dependencies_of: DependencyAccessor | None = None,
        trace_resolution: bool = False,
    ) -> None:
        """
        Initialize the sequence.

        Args:
            source: Modules in declaration order (list, mapping, iterable or cursor)
            dependencies_of: Optional accessor returning a module's dependencies
            trace_resolution: Log every resolution step at DEBUG level

        Raises:
            TypeError: If the source cannot be iterated
        """
        self._source: ModuleCursor = normalize_source(source)
        self._dependencies_of = dependencies_of
        self.trace_resolution = trace_resolution

        self._served: dict[str, ModuleInterface] = {}
        self._current: ModuleInterface | None = None
        self._started = False

    @property
    def source(self) -> ModuleCursor:
        """The cursor modules are drawn from."""
        return self._source

    @property
    def served_modules(self) -> dict[str, ModuleInterface]:
        """Modules already served in this pass, mapped by key."""
        return dict(self._served)

    @property
    def state(self) -> SequenceState:
        """Current iteration state."""
        if not self._started:
            return SequenceState.UNSTARTED
        if self._current is None:
            return SequenceState.EXHAUSTED
        return SequenceState.POSITIONED

    # -------------------------------------------------------------------------
    # Served-set bookkeeping
    # -------------------------------------------------------------------------

    def is_served(self, key: str) -> bool:
        """
        Check whether a module was already served in this pass.

        Args:
            key: Module key

        Returns:
            True if a module with this key was served
        """
        return key in self._served

    def _mark_served(self, module: ModuleInterface) -> None:
        self._served[module.key] = module

    # -------------------------------------------------------------------------
    # Dependency resolution
    # -------------------------------------------------------------------------

    def get_module_dependencies(self, module: ModuleInterface) -> Sequence[Any]:
        """
        Get the declared dependencies of a module.

        Uses the accessor given at construction time, falling back to the
        module's ``dependencies`` attribute. A mapping of dependencies is read
        by its values. Subclasses may override this to read dependencies from
        elsewhere.

        Args:
            module: The module

        Returns:
            Dependencies in declaration order
        """
        if self._dependencies_of is not None:
            dependencies = self._dependencies_of(module)
        else:
            dependencies = getattr(module, "dependencies", None)
        if isinstance(dependencies, Mapping):
            return list(dependencies.values())
        return dependencies or ()

    def unserved_dependencies(self, module: ModuleInterface) -> list[ModuleInterface]:
        """
        Get the dependencies of a module that have not been served yet.

        Entries that are not module references are skipped.

        Args:
            module: The module

        Returns:
            Unserved dependencies in declaration order
        """
        unserved = []
        for dependency in self.get_module_dependencies(module):
            if not is_module(dependency):
                logger.debug(
                    "Skipping malformed dependency entry",
                    module=module.key,
                    entry=repr(dependency),
                )
                continue
            if not self.is_served(dependency.key):
                unserved.append(dependency)
        return unserved

    def resolve(self, module: ModuleInterface) -> ModuleInterface:
        """
        Find the deepest unserved dependency of a module.

        Descends into the first unserved dependency, in declaration order,
        until a module without unserved dependencies is reached. Modules on
        the descent path are ignored when met again, which terminates cycles.

        Args:
            module: The candidate module

        Returns:
            The module to serve next: the candidate itself or one of its
            transitive dependencies
        """
        # The descent only follows one branch, so a single path record is
        # exactly the set of ancestors of the module being examined.
        ignore: dict[str, ModuleInterface] = {}
        while True:
            ignore[module.key] = module
            unserved = self.unserved_dependencies(module)
            candidates = [dep for dep in unserved if dep.key not in ignore]

            if len(candidates) < len(unserved):
                logger.debug(
                    "Dependency cycle guard applied",
                    module=module.key,
                    ignored=[dep.key for dep in unserved if dep.key in ignore],
                )

            if not candidates:
                return module

            if self.trace_resolution:
                logger.debug(
                    "Descending into dependency",
                    module=module.key,
                    dependency=candidates[0].key,
                    depth=len(ignore),
                )
            module = candidates[0]

    # -------------------------------------------------------------------------
    # Iteration protocol
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """
        Start a new pass.

        Forgets served modules, rewinds the source and positions the sequence
        on the first module to serve.
        """
        self._served = {}
        self._current = None
        self._source.rewind()
        logger.debug("Dependency sequence reset")
        self.advance()

    def current(self) -> ModuleInterface | None:
        """Return the module being served, or None once exhausted."""
        return self._current

    def key(self) -> str | None:
        """Return the key of the module being served, or None once exhausted."""
        return None if self._current is None else self._current.key

    def is_valid(self) -> bool:
        """Return True while a module is being served."""
        return self._current is not None

    def advance(self) -> None:
        """
        Move to the next module to serve.

        The module currently served is marked as served. The source is then
        moved past every served module, and the first unserved one is
        resolved to its deepest unserved dependency. The source stays on
        that module until it is served itself.
        """
        self._started = True

        previous = self._current
        if previous is not None:
            self._mark_served(previous)

        while self._source.valid() and not self._is_servable(self._source.current()):
            self._source.next()

        candidate = self._source.current() if self._source.valid() else None
        if candidate is None:
            if previous is not None:
                logger.debug("Dependency sequence exhausted", served=len(self._served))
            self._current = None
            return

        self._current = self.resolve(candidate)

        if self.trace_resolution:
            logger.debug(
                "Serving module",
                module=self._current.key,
                candidate=candidate.key,
                served=len(self._served),
            )

    def _is_servable(self, candidate: Any) -> bool:
        return is_module(candidate) and not self.is_served(candidate.key)

    # -------------------------------------------------------------------------
    # Python iteration
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[ModuleInterface]:
        self.reset()
        while self._current is not None:
            yield self._current
            self.advance()

    def served_order(self) -> list[ModuleInterface]:
        """
        Run a full pass and return the modules in the order they were served.

        Returns:
            Served modules
        """
        return list(self)

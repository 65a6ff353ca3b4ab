"""Positional Module Sequence - ordered, resettable cursor over modules.

The sequence keeps modules in the order the caller declared them and an
index of modules by key. It never looks at dependencies.
"""

from collections.abc import Iterable, Iterator

import structlog

from ..models.module import ModuleInterface
from .cursor import ModuleCursor

logger = structlog.get_logger(__name__)


class ModuleSequence(ModuleCursor):
    """
    Addressable cursor over a fixed, ordered list of modules.

    Out-of-range positions and unknown keys yield None instead of raising.

    Usage:
        sequence = ModuleSequence([core, cache, http])
        sequence.module_by_key("cache")
        sequence.module_at(0)
    """

    def __init__(self, modules: Iterable[ModuleInterface] | None = None) -> None:
        """
        Initialize the sequence.

        Args:
            modules: Modules in declaration order (default: none)
        """
        self._modules: list[ModuleInterface] = []
        self._module_map: dict[str, ModuleInterface] = {}
        self._position = 0
        self._current: ModuleInterface | None = None
        self.set_modules(modules or [])

    @property
    def modules(self) -> list[ModuleInterface]:
        """Modules in declaration order."""
        return self._modules

    @property
    def position(self) -> int:
        """Zero-based ordinal of the cursor."""
        return self._position

    def set_modules(self, modules: Iterable[ModuleInterface]) -> None:
        """
        Replace the modules served by this sequence.

        Rebuilds the key index and moves the cursor back to the start.

        Args:
            modules: Modules in declaration order
        """
        self._modules = list(modules)
        self._module_map = self._create_module_map(self._modules)
        self.reset()

        logger.debug("Module sequence populated", module_count=len(self._modules))

    @staticmethod
    def _create_module_map(modules: list[ModuleInterface]) -> dict[str, ModuleInterface]:
        module_map: dict[str, ModuleInterface] = {}
        for module in modules:
            # First declaration wins for duplicated keys
            module_map.setdefault(module.key, module)
        return module_map

    def module_at(self, position: int) -> ModuleInterface | None:
        """
        Get the module at a position.

        Args:
            position: Zero-based ordinal

        Returns:
            The module, or None if the position is out of range
        """
        if 0 <= position < len(self._modules):
            return self._modules[position]
        return None

    def module_by_key(self, key: str) -> ModuleInterface | None:
        """
        Get a module by its key.

        Args:
            key: Module key

        Returns:
            The module, or None if no module has that key
        """
        return self._module_map.get(key)

    def reset(self) -> None:
        """Move the cursor back to the first module."""
        self._position = 0
        self._current = None

    def advance(self) -> None:
        """Move the cursor forward by one module."""
        self._position += 1

    def at_end(self) -> bool:
        """Return True once the cursor has passed the last module."""
        return self._position >= len(self._modules)

    def current(self) -> ModuleInterface | None:
        """Return the module at the cursor, or None past the end."""
        self._current = self.module_at(self._position)
        return self._current

    def key(self) -> str | None:
        """Return the key of the module at the cursor, or None past the end."""
        current = self.current()
        return None if current is None else current.key

    # Cursor protocol, so a ModuleSequence can feed a dependency-aware sequence

    def rewind(self) -> None:
        self.reset()

    def next(self) -> None:
        self.advance()

    def valid(self) -> bool:
        return not self.at_end()

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[ModuleInterface]:
        self.reset()
        while not self.at_end():
            module = self.current()
            if module is not None:
                yield module
            self.advance()

    def __repr__(self) -> str:
        keys = [module.key for module in self._modules]
        return f"ModuleSequence({keys!r}, position={self._position})"

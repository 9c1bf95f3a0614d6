"""
Per-run decompilation state shared by the statement tree.
"""
import logging
from typing import Iterator, Set

LOG = logging.getLogger(__name__)


class GlobalRegistry:
    """
    Names of the global variables declared during one decompilation run.

    A name is registered at most once. Registering it again is reported, not
    rejected; what to do about it is up to the caller.
    """

    def __init__(self):
        self._names: Set[str] = set()

    def add(self, name: str) -> bool:
        """
        Register a global variable name.

        Returns:
            True if the name was new, False if it was already registered
        """
        if name in self._names:
            LOG.debug("Global variable %r is already registered", name)
            return False
        self._names.add(name)
        return True

    def is_global(self, name: str) -> bool:
        return name in self._names

    def reset(self) -> None:
        self._names.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))


class DecompileContext:
    """
    State of a single decompilation run.

    Every top-level section holds a reference to the context it was built in;
    the context is shared, never copied, when statements are cloned.
    """

    def __init__(self):
        self.registry = GlobalRegistry()
        self.functions: Set[str] = set()

    def is_function(self, name: str) -> bool:
        return name in self.functions

    def reset(self) -> None:
        """Forget everything learned so far, ready for the next story."""
        self.registry.reset()
        self.functions.clear()

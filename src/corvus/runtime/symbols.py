"""
Per-namespace symbol interning.

The engine compares argument names as small integers. The table caches the
mapping in both directions so each distinct name is interned once per
namespace; ids never leave the host layer.
"""

from typing import Callable, Dict


class SymbolTable:
    """Bidirectional name <-> id cache in front of the engine's intern table."""

    def __init__(self, intern: Callable[[str], int], lookup: Callable[[int], str]):
        self._intern = intern
        self._lookup = lookup
        self._ids: Dict[str, int] = {}
        self._names: Dict[int, str] = {}

    def intern(self, name: str) -> int:
        """Return the id for ``name``, asking the engine only the first time."""
        symbol = self._ids.get(name)
        if symbol is None:
            symbol = self._intern(name)
            self._remember(name, symbol)
        return symbol

    def name_of(self, symbol: int) -> str:
        """Return the name behind ``symbol``."""
        name = self._names.get(symbol)
        if name is None:
            name = self._lookup(symbol)
            self._remember(name, symbol)
        return name

    def _remember(self, name: str, symbol: int) -> None:
        self._ids[name] = symbol
        self._names[symbol] = name

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, name: str) -> bool:
        return name in self._ids

"""
Argument access for host function implementations.

An Args is built for one invocation of a host function. It decodes the
engine's raw arguments on demand and owns every callback it was handed;
the namespace releases it when the call returns, whatever the outcome.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..engine import Engine, Handle, RawArg
from ..errors import (
    error_missing_argument, error_unknown_argument_name, error_use_after_destroy,
)
from ..signatures import FunctionSignature
from ..values import decode
from .handles import Owner
from .symbols import SymbolTable


class Args(Owner):
    """
    Named access to the arguments supplied at one call site.

    Only supplied arguments are visible; declared-but-omitted ones are
    reported by ``demand`` and defaulted by ``maybe``. Variadic arguments
    decode to a list of every supplied occurrence.
    """

    kind = "args"

    def __init__(self, engine: Engine, raw_args: List[RawArg],
                 symbols: SymbolTable, signature: FunctionSignature):
        super().__init__(engine)
        self._signature = signature
        self._entries: List[Tuple[str, Any, Optional[Handle]]] = [
            (symbols.name_of(symbol), value, block) for symbol, value, block in raw_args
        ]
        self._decoded: Dict[int, Any] = {}
        self._released = False

    @property
    def function_name(self) -> str:
        return self._signature.name

    def _check_live(self) -> None:
        if self._released:
            raise error_use_after_destroy(self.kind)

    def _value(self, index: int) -> Any:
        if index not in self._decoded:
            _, value, block = self._entries[index]
            self._decoded[index] = decode(value, block, self)
        return self._decoded[index]

    def _lookup(self, name: str) -> Optional[Any]:
        """Decoded value(s) for ``name``, or None when not supplied."""
        self._check_live()
        spec = self._signature.arg(name)
        if spec is None:
            raise error_unknown_argument_name(name, self.function_name)
        indices = [i for i, entry in enumerate(self._entries) if entry[0] == name]
        if not indices:
            return None
        if spec.variadic:
            return [self._value(i) for i in indices]
        return self._value(indices[0])

    def demand(self, name: str) -> Any:
        """The value of a required argument."""
        found = self._lookup(name)
        if found is None:
            raise error_missing_argument(name)
        return found

    def maybe(self, name: str, fallback: Any) -> Any:
        """The value of ``name`` if supplied, otherwise ``fallback``."""
        found = self._lookup(name)
        return fallback if found is None else found

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        self._check_live()
        for index, (name, _, _) in enumerate(self._entries):
            yield name, self._value(index)

    def __len__(self) -> int:
        self._check_live()
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        self._check_live()
        return any(entry[0] == name for entry in self._entries)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release every callback handed to this call, exactly once."""
        self._check_live()
        self._released = True
        self._release_owned()
        # Handles that were never decoded were still ours.
        for index, (_, _, block) in enumerate(self._entries):
            if block is not None and index not in self._decoded:
                self._engine.drop_block(block)

"""
Standalone single-expression evaluator.

An Evaluator keeps its own global variables and evaluates one expression
at a time; it has no host functions. Callbacks it returns are owned by the
evaluator and released with it.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from ..engine import Engine, Handle, unwrap
from ..introspection import TypeInfo, type_info_from_wire
from ..values import encode, encode_inputs, decode
from .handles import Resource

logger = logging.getLogger(__name__)


class Evaluator(Resource):
    """An engine-side expression evaluator with persistent globals."""

    kind = "evaluator"

    def __init__(self, engine: Engine):
        super().__init__(engine, engine.alloc_evaluator())
        logger.debug("allocated evaluator %r", self._handle)

    def eval(self, source: str, inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """Evaluate ``source``; ``inputs`` shadow globals for this call only."""
        handle = self._live_handle()
        value, block = unwrap(self._engine.evaluate_source(handle, source, encode_inputs(inputs)))
        return decode(value, block, self)

    def type_of(self, source: str) -> TypeInfo:
        """Free input types and the output type of ``source``."""
        payload = unwrap(self._engine.type_of(self._live_handle(), source))
        return type_info_from_wire(payload, source)

    def set(self, name: str, value: Any) -> None:
        """Bind a global variable."""
        self._engine.set_var(self._live_handle(), name, encode(value, name))

    def vars(self) -> Dict[str, Any]:
        """All globals, decoded."""
        return {name: decode(v) for name, v in self._engine.get_vars(self._live_handle()).items()}

    def _release(self, handle: Handle) -> None:
        self._engine.drop_evaluator(handle)

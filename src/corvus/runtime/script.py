"""
Compiled scripts.

A Script is one unit of source compiled against a namespace. It can be
recompiled in place (the Python object and its handle stay valid),
inspected for inferred input types and type errors, and evaluated.
Callbacks it returns are owned by the script.
"""

import logging
from typing import Any, Mapping, Optional, TYPE_CHECKING

from ..engine import Handle, unwrap
from ..introspection import TypeInfo, type_info_from_wire
from ..values import encode_inputs, decode
from .handles import Resource

if TYPE_CHECKING:
    from .namespace import Namespace

logger = logging.getLogger(__name__)


class Script(Resource):
    """A compiled unit of source bound to one namespace."""

    kind = "script"

    def __init__(self, namespace: "Namespace", handle: Handle, source: str):
        super().__init__(namespace.engine, handle)
        self._namespace = namespace
        self._source = source

    @property
    def source(self) -> str:
        return self._source

    @property
    def namespace(self) -> "Namespace":
        return self._namespace

    def type_info(self) -> TypeInfo:
        """Inferred input types and any type errors (works with errors present)."""
        payload = unwrap(self._engine.type_info(self._live_handle()))
        return type_info_from_wire(payload, self._source)

    def eval(self, inputs: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Evaluate the script with the given inputs.

        The engine does not refuse to run a script with type errors; check
        ``type_info().errors`` first when that matters.
        """
        handle = self._live_handle()
        value, block = unwrap(self._engine.evaluate(handle, encode_inputs(inputs)))
        return decode(value, block, self)

    def recompile(self, source: str) -> None:
        """
        Replace the script's behaviour, keeping its identity.

        Callbacks returned by earlier evaluations belong to the old program
        and are released.
        """
        handle = self._live_handle()
        self._release_owned()
        self._engine.recompile(handle, source)
        self._source = source
        logger.debug("recompiled script %r", self._handle)

    def destroy(self) -> None:
        super().destroy()
        self._namespace.disown(self)

    release = destroy

    def _release(self, handle: Handle) -> None:
        self._engine.drop_script(handle)

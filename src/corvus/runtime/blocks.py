"""
Callback values.

A Block wraps an engine-side closure so host code can call it like a
function. Its lifetime belongs to whoever produced it (the Args of the host
call that received it, or the Script / Evaluator whose result it was); the
block never releases itself.
"""

import logging
from typing import Any

from ..engine import Engine, Handle, unwrap
from ..values import encode, decode
from .handles import Owner, Resource

logger = logging.getLogger(__name__)


class Block(Resource):
    """A host-callable wrapper around an engine closure handle."""

    kind = "block"

    def __init__(self, engine: Engine, handle: Handle, owner: Owner):
        super().__init__(engine, handle)
        self._owner = owner

    def __call__(self, *args: Any) -> Any:
        handle = self._live_handle()
        encoded = [encode(a, f"[{i}]") for i, a in enumerate(args)]
        value, result_block = unwrap(self._engine.call_block(handle, encoded))
        # A callback returned by a callback shares this block's owner.
        return decode(value, result_block, self._owner)

    def destroy(self) -> None:
        super().destroy()
        self._owner.disown(self)

    release = destroy

    def _release(self, handle: Handle) -> None:
        self._engine.drop_block(handle)

    def __repr__(self) -> str:
        state = "released" if self.destroyed else repr(self._handle)
        return f"Block({state})"

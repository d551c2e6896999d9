"""
Ownership discipline for engine resources.

Every engine handle has exactly one owner. Owners release what they own
before releasing themselves, so teardown is always children-before-parent.
A released resource refuses every further operation, a second release
included.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List

from ..engine import Engine, Handle
from ..errors import error_use_after_destroy

logger = logging.getLogger(__name__)


class Owner:
    """Something that owns engine resources (namespaces, scripts, args, ...)."""

    kind = "owner"

    def __init__(self, engine: Engine):
        self._engine = engine
        self._owned: List["Resource"] = []

    @property
    def engine(self) -> Engine:
        return self._engine

    def _check_live(self) -> None:
        pass

    def adopt(self, resource: "Resource") -> "Resource":
        """Take ownership of ``resource``."""
        self._check_live()
        self._owned.append(resource)
        return resource

    def disown(self, resource: "Resource") -> None:
        """Forget ``resource`` after it was released on its own."""
        if resource in self._owned:
            self._owned.remove(resource)

    def wrap_block(self, handle: Handle) -> Any:
        """Wrap a callback handle the engine gave us and own it."""
        from .blocks import Block
        return self.adopt(Block(self._engine, handle, self))

    @property
    def owned(self) -> List["Resource"]:
        return list(self._owned)

    def _release_owned(self) -> None:
        owned, self._owned = self._owned, []
        for resource in reversed(owned):
            if not resource.destroyed:
                resource.destroy()


class Resource(Owner, ABC):
    """An owned engine handle with an explicit, one-time release."""

    kind = "resource"

    def __init__(self, engine: Engine, handle: Handle):
        super().__init__(engine)
        self._handle = handle

    @property
    def destroyed(self) -> bool:
        return self._handle is None

    def _check_live(self) -> None:
        if self._handle is None:
            raise error_use_after_destroy(self.kind)

    def _live_handle(self) -> Handle:
        self._check_live()
        return self._handle

    def destroy(self) -> None:
        """Release everything this resource owns, then the resource itself."""
        handle = self._live_handle()
        self._release_owned()
        self._handle = None
        logger.debug("releasing %s %r", self.kind, handle)
        self._release(handle)

    release = destroy

    @abstractmethod
    def _release(self, handle: Handle) -> None:
        """Hand ``handle`` back to the engine."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self.destroyed:
            self.destroy()
        return False

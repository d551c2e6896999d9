"""
The engine's low-level call surface.

The evaluation engine is an external compiled module. This layer only ever
talks to it through the entry points declared on ``Engine``; handles it
returns are opaque. Fallible calls return an envelope, either
``{"Ok": payload}`` or ``{"Err": message}``, which ``unwrap`` converts.

Evaluation payloads (``evaluate``, ``evaluate_source``, ``call_block``) are
``[value, block_handle]`` pairs; ``block_handle`` is None unless the result is
a callback, in which case ``value`` is None.

Host implementations registered through ``define`` are called with a list of
``(symbol_id, value, block_handle)`` triples and must return an envelope.
"""

import importlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import error_engine, error_configuration

logger = logging.getLogger(__name__)

Handle = Any
Result = Dict[str, Any]
RawArg = Tuple[int, Any, Optional[Handle]]
HostImplementation = Callable[[List[RawArg]], Result]

DEFAULT_FACTORY = "create_engine"


def unwrap(result: Result) -> Any:
    """Return the Ok payload or raise EngineError with the engine's message."""
    if "Err" in result:
        raise error_engine(result["Err"])
    return result["Ok"]


class Engine(ABC):
    """Entry points the host layer consumes."""

    # --- Namespaces ---

    @abstractmethod
    def alloc_namespace(self) -> Handle:
        pass

    @abstractmethod
    def drop_namespace(self, namespace: Handle) -> None:
        pass

    @abstractmethod
    def intern_symbol(self, namespace: Handle, name: str) -> int:
        pass

    @abstractmethod
    def lookup_symbol(self, namespace: Handle, symbol: int) -> str:
        pass

    @abstractmethod
    def define(self, namespace: Handle, signature: Dict[str, Any],
               implementation: HostImplementation) -> None:
        """Register a host function; ``signature`` names arguments by symbol id."""
        pass

    @abstractmethod
    def get_signature(self, namespace: Handle, name: str) -> Optional[Dict[str, Any]]:
        pass

    # --- Scripts ---

    @abstractmethod
    def compile(self, namespace: Handle, source: str) -> Handle:
        pass

    @abstractmethod
    def recompile(self, script: Handle, source: str) -> None:
        pass

    @abstractmethod
    def type_info(self, script: Handle) -> Result:
        """Payload: ``{"inputs": {name: type}, "errors": [...]}``."""
        pass

    @abstractmethod
    def evaluate(self, script: Handle, inputs: Dict[str, Any]) -> Result:
        pass

    @abstractmethod
    def drop_script(self, script: Handle) -> None:
        pass

    # --- Blocks ---

    @abstractmethod
    def call_block(self, block: Handle, args: List[Any]) -> Result:
        pass

    @abstractmethod
    def drop_block(self, block: Handle) -> None:
        pass

    # --- Standalone evaluators ---

    @abstractmethod
    def alloc_evaluator(self) -> Handle:
        pass

    @abstractmethod
    def drop_evaluator(self, evaluator: Handle) -> None:
        pass

    @abstractmethod
    def evaluate_source(self, evaluator: Handle, source: str, inputs: Dict[str, Any]) -> Result:
        pass

    @abstractmethod
    def type_of(self, evaluator: Handle, source: str) -> Result:
        """Payload: ``{"inputs": {name: type}, "output": type}``."""
        pass

    @abstractmethod
    def set_var(self, evaluator: Handle, name: str, value: Any) -> None:
        pass

    @abstractmethod
    def get_vars(self, evaluator: Handle) -> Dict[str, Any]:
        pass


def load_engine(spec: str) -> Engine:
    """
    Create an engine from ``"package.module"`` or ``"package.module:factory"``.

    The factory defaults to ``create_engine`` and is called with no arguments.
    """
    if not spec:
        raise error_configuration("no engine configured")
    if ":" in spec:
        module_name, factory_name = spec.split(":", 1)
    else:
        module_name, factory_name = spec, DEFAULT_FACTORY

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise error_configuration(f"cannot import engine module '{module_name}': {e}") from e

    factory = getattr(module, factory_name, None)
    if factory is None or not callable(factory):
        raise error_configuration(f"engine module '{module_name}' has no factory '{factory_name}'")

    engine = factory()
    if not isinstance(engine, Engine):
        raise error_configuration(
            f"'{spec}' produced {type(engine).__name__}, not an Engine"
        )
    logger.debug("loaded engine %s from %s", type(engine).__name__, spec)
    return engine


def engine_from_config(config=None) -> Engine:
    """Create the engine named by ``config`` (loaded from file/environment if omitted)."""
    if config is None:
        from .config import load_config
        config = load_config()
    return load_engine(config.engine)

"""
Namespaces: where host functions and type aliases live and scripts are compiled.

Usage:
    with Namespace(engine) as ns:
        ns.define_type("Point", {"x": "number", "y": "number"})

        def norm(fn):
            fn.require_arg("norm", "Point").never_fails().returns("number")
            fn.implement(lambda args: math.hypot(**args.demand("norm")))

        ns.define(norm)
        script = ns.compile("norm(p)")
        script.eval({"p": {"x": 3, "y": 4}})   # 5.0
"""

import logging
from typing import Any, Callable, List, Optional

from ..engine import Engine, Handle, RawArg, Result
from ..registry import TypeRegistry
from ..signatures import FunctionBuilder, FunctionDefinition, FunctionSignature
from ..types import Type
from ..values import encode
from .args import Args
from .handles import Resource
from .script import Script
from .symbols import SymbolTable

logger = logging.getLogger(__name__)


def _failure(e: Exception) -> Result:
    return {"Err": str(e) or type(e).__name__}


class Namespace(Resource):
    """
    An engine registration scope.

    Owns its type aliases, its symbol table and every script compiled in it.
    Destroying the namespace destroys those scripts first.
    """

    kind = "namespace"

    def __init__(self, engine: Engine):
        super().__init__(engine, engine.alloc_namespace())
        handle = self._handle
        self._types = TypeRegistry()
        self._symbols = SymbolTable(
            lambda name: engine.intern_symbol(handle, name),
            lambda symbol: engine.lookup_symbol(handle, symbol),
        )
        logger.debug("allocated namespace %r", handle)

    @property
    def types(self) -> TypeRegistry:
        return self._types

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    @property
    def scripts(self) -> List[Script]:
        return [r for r in self._owned if isinstance(r, Script)]

    def define_type(self, name: str, expr: Any) -> Type:
        """Define a type alias usable by later declarations in this namespace."""
        self._check_live()
        return self._types.define(name, expr)

    def define(self, build: Callable[[FunctionBuilder], Any]) -> FunctionSignature:
        """
        Declare and register a host function.

        ``build`` receives a fresh FunctionBuilder; the declaration is
        validated here, after ``build`` returns.
        """
        handle = self._live_handle()
        builder = FunctionBuilder(self._types)
        build(builder)
        definition = builder.validate()
        wire = definition.signature.to_wire(self._symbols.intern)
        self._engine.define(handle, wire, self._wrap(definition))
        logger.debug("defined %s%s", definition.signature.name, definition.signature)
        return definition.signature

    def _wrap(self, definition: FunctionDefinition) -> Callable[[List[RawArg]], Result]:
        signature = definition.signature
        implementation = definition.implementation

        def invoke(raw_args: List[RawArg]) -> Result:
            args = Args(self._engine, raw_args, self._symbols, signature)
            try:
                result = {"Ok": encode(implementation(args))}
            except Exception as e:
                if signature.total:
                    logger.error(
                        "function '%s' is declared never-fails but raised: %s",
                        signature.name, e, exc_info=True,
                    )
                result = _failure(e)
            try:
                # The implementation may have released its args already.
                if not args.released:
                    args.release()
            except Exception as e:
                logger.error("releasing arguments of '%s' failed: %s", signature.name, e)
                return _failure(e)
            return result

        return invoke

    def get_signature(self, name: str) -> Optional[FunctionSignature]:
        """The signature registered under ``name``, or None."""
        wire = self._engine.get_signature(self._live_handle(), name)
        if wire is None:
            return None
        return FunctionSignature.from_wire(wire, self._symbols.name_of)

    def compile(self, source: str) -> Script:
        """Compile ``source`` into a script owned by this namespace."""
        handle = self._live_handle()
        script = Script(self, self._engine.compile(handle, source), source)
        self.adopt(script)
        logger.debug("compiled script %r in namespace %r", script._handle, handle)
        return script

    def _release(self, handle: Handle) -> None:
        self._engine.drop_namespace(handle)

"""
Host function signatures and the builder that produces them.

A function is declared argument by argument; the first argument's name
names the function. Nothing is checked until ``validate()``, which the
namespace calls at registration time.

Usage:
    def build(fn):
        fn.require_arg("add", "number")
        fn.require_arg("to", "number")
        fn.never_fails()
        fn.returns("number")
        fn.implement(lambda args: args.demand("add") + args.demand("to"))
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import error_builder
from .registry import TypeRegistry
from .types import Type, type_from_wire


@dataclass(frozen=True)
class ArgSpec:
    """One declared argument."""
    name: str
    type: Type
    required: bool = True
    variadic: bool = False

    def __str__(self) -> str:
        mark = "" if self.required else "?"
        dots = "..." if self.variadic else ""
        return f"{self.name}{mark}: {self.type.name}{dots}"


@dataclass(frozen=True)
class FunctionSignature:
    """Type signature of a host function."""
    args: Tuple[ArgSpec, ...]
    return_type: Type
    total: bool = False

    @property
    def name(self) -> str:
        """The function's name: its first argument's name."""
        return self.args[0].name

    def arg(self, name: str) -> Optional[ArgSpec]:
        """Look up an argument by name."""
        for spec in self.args:
            if spec.name == name:
                return spec
        return None

    @property
    def arg_names(self) -> List[str]:
        return [spec.name for spec in self.args]

    def to_wire(self, intern: Callable[[str], int]) -> Dict[str, Any]:
        """Serialise for the engine, replacing argument names by symbol ids."""
        return {
            "total": self.total,
            "args": [
                {
                    "name": intern(spec.name),
                    "ty": spec.type.to_wire(),
                    "required": spec.required,
                    "variadic": spec.variadic,
                }
                for spec in self.args
            ],
            "returns": self.return_type.to_wire(),
        }

    @classmethod
    def from_wire(cls, wire: Dict[str, Any], name_of: Callable[[int], str]) -> "FunctionSignature":
        """Inverse of to_wire, translating symbol ids back to names."""
        args = tuple(
            ArgSpec(
                name=name_of(a["name"]),
                type=type_from_wire(a["ty"]),
                required=bool(a["required"]),
                variadic=bool(a["variadic"]),
            )
            for a in wire["args"]
        )
        return cls(args, type_from_wire(wire["returns"]), bool(wire["total"]))

    def __str__(self) -> str:
        params = ", ".join(str(a) for a in self.args)
        fails = "" if self.total else " !"
        return f"({params}) -> {self.return_type.name}{fails}"


@dataclass(frozen=True)
class FunctionDefinition:
    """A validated signature paired with its implementation."""
    signature: FunctionSignature
    implementation: Callable[..., Any]


class FunctionBuilder:
    """
    Accumulates one host function's declaration.

    Argument types are resolved against ``registry`` as they are declared,
    so unknown type names fail at the declaring call.
    """

    def __init__(self, registry: TypeRegistry):
        self._registry = registry
        self._args: List[ArgSpec] = []
        self._total = False
        self._return_type: Optional[Type] = None
        self._implementation: Optional[Callable[..., Any]] = None

    def _add(self, name: str, expr: Any, required: bool, variadic: bool) -> "FunctionBuilder":
        self._args.append(ArgSpec(name, self._registry.resolve(expr), required, variadic))
        return self

    def require_arg(self, name: str, expr: Any) -> "FunctionBuilder":
        return self._add(name, expr, required=True, variadic=False)

    def allow_arg(self, name: str, expr: Any) -> "FunctionBuilder":
        return self._add(name, expr, required=False, variadic=False)

    def require_arg_repeated(self, name: str, expr: Any) -> "FunctionBuilder":
        """A variadic argument that must be supplied at least once."""
        return self._add(name, expr, required=True, variadic=True)

    def allow_arg_repeated(self, name: str, expr: Any) -> "FunctionBuilder":
        return self._add(name, expr, required=False, variadic=True)

    def can_fail(self) -> "FunctionBuilder":
        self._total = False
        return self

    def never_fails(self) -> "FunctionBuilder":
        self._total = True
        return self

    def returns(self, expr: Any) -> "FunctionBuilder":
        self._return_type = self._registry.resolve(expr)
        return self

    def implement(self, implementation: Callable[..., Any]) -> "FunctionBuilder":
        self._implementation = implementation
        return self

    @property
    def function_name(self) -> str:
        return self._args[0].name if self._args else "<anonymous>"

    def validate(self) -> FunctionDefinition:
        """Check the declaration is complete and freeze it."""
        name = self.function_name
        if not self._args:
            raise error_builder(name, "at least one argument is required")

        seen = set()
        for spec in self._args:
            if spec.name in seen:
                raise error_builder(name, f"argument '{spec.name}' is declared twice")
            seen.add(spec.name)

        if self._return_type is None:
            raise error_builder(name, "no return type declared")
        if self._implementation is None:
            raise error_builder(name, "no implementation provided")
        if not callable(self._implementation):
            raise error_builder(name, "implementation is not callable")

        signature = FunctionSignature(tuple(self._args), self._return_type, self._total)
        return FunctionDefinition(signature, self._implementation)

"""
Type expressions and the alias registry.

A type expression is one of:
    - a primitive name: "string", "boolean", "number", "time" / "date"
    - the name of an alias defined earlier in the same registry
    - a mapping of field name -> type expression (a closed record)
    - the result of a helper: list_of(), variable(), block(), record()
    - an already-resolved Type

Record fields are required unless wrapped in optional(); required() is
accepted for symmetry.

Usage:
    types = TypeRegistry()
    types.define("Point", {"x": "number", "y": "number"})
    types.resolve(list_of("Point"))
    types.resolve({"label": optional("string"), "at": "Point"})
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import error_unknown_type, error_duplicate_alias
from .types import (
    Type, Field, ListType, VarType, BlockType,
    PRIMITIVE_NAMES, make_record_type,
)


# =============================================================================
# Helper expressions
# =============================================================================

@dataclass(frozen=True)
class ListOf:
    element: Any


@dataclass(frozen=True)
class Variable:
    var_name: str


@dataclass(frozen=True)
class BlockOf:
    params: Tuple[Any, ...]
    returns: Any


@dataclass(frozen=True)
class FieldSpec:
    """A record field marked explicitly optional or required."""
    expr: Any
    optional: bool


@dataclass(frozen=True)
class RecordOf:
    fields: Tuple[Tuple[str, Any], ...]
    extensible: bool


def list_of(element: Any) -> ListOf:
    """A list whose elements have the given type."""
    return ListOf(element)


def variable(name: str) -> Variable:
    """A generic type placeholder."""
    return Variable(name)


def block(params: Sequence[Any], returns: Any) -> BlockOf:
    """A callback taking ``params`` and returning ``returns``."""
    return BlockOf(tuple(params), returns)


def optional(expr: Any) -> FieldSpec:
    """Mark a record field as optional."""
    return FieldSpec(expr, optional=True)


def required(expr: Any) -> FieldSpec:
    """Mark a record field as required (the default)."""
    return FieldSpec(expr, optional=False)


def record(fields: Mapping[str, Any], extensible: bool = False) -> RecordOf:
    """A record; ``extensible=True`` tolerates undeclared fields."""
    return RecordOf(tuple(fields.items()), extensible)


# =============================================================================
# Type Registry
# =============================================================================

class TypeRegistry:
    """
    Resolves type expressions and stores named aliases.

    Aliases are expanded when defined, so an alias may only refer to aliases
    defined before it. Each registry is independent: the same alias name can
    be defined once in each.
    """

    def __init__(self):
        self._aliases: Dict[str, Type] = {}

    def define(self, name: str, expr: Any) -> Type:
        """Resolve ``expr`` and store it under ``name``."""
        if name in self._aliases or name in PRIMITIVE_NAMES:
            raise error_duplicate_alias(name)
        resolved = self.resolve(expr)
        self._aliases[name] = resolved
        return resolved

    def lookup(self, name: str) -> Optional[Type]:
        """Look up an alias by name."""
        return self._aliases.get(name)

    def aliases(self) -> Dict[str, Type]:
        return dict(self._aliases)

    def __contains__(self, name: str) -> bool:
        return name in self._aliases

    def resolve(self, expr: Any) -> Type:
        """Turn a type expression into a Type."""
        if isinstance(expr, Type):
            return expr

        if isinstance(expr, str):
            prim = PRIMITIVE_NAMES.get(expr)
            if prim is not None:
                return prim
            alias = self._aliases.get(expr)
            if alias is not None:
                return alias
            raise error_unknown_type(expr)

        if isinstance(expr, ListOf):
            return ListType(self.resolve(expr.element))

        if isinstance(expr, Variable):
            return VarType(expr.var_name)

        if isinstance(expr, BlockOf):
            return BlockType(
                tuple(self.resolve(p) for p in expr.params),
                self.resolve(expr.returns),
            )

        if isinstance(expr, RecordOf):
            return self._resolve_record(expr.fields, expr.extensible)

        if isinstance(expr, Mapping):
            return self._resolve_record(expr.items(), False)

        # FieldSpec outside of a record lands here too.
        raise error_unknown_type(expr)

    def _resolve_record(self, items, extensible: bool) -> Type:
        fields: Dict[str, Field] = {}
        for field_name, field_expr in items:
            if not isinstance(field_name, str):
                raise error_unknown_type(field_name)
            if isinstance(field_expr, FieldSpec):
                fields[field_name] = Field(self.resolve(field_expr.expr), field_expr.optional)
            else:
                fields[field_name] = Field(self.resolve(field_expr), False)
        return make_record_type(fields, extensible)

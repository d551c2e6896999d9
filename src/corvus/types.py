"""
Type model for values crossing the engine boundary.

Types describe the shape of a value:
    Primitives: Str, Bool, Num, Time
    Var(name): an unresolved/generic placeholder
    List(T)
    Record(extensible, fields)
    Block(params, returns): a callback taking and returning values

Each type converts to and from the engine's wire form, e.g. ``"Num"``,
``{"List": "Str"}`` or ``{"Record": [False, {"x": {"optional": False, "output": "Num"}}]}``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple
from abc import ABC, abstractmethod

from .errors import error_unknown_type


# =============================================================================
# Type Classes
# =============================================================================

@dataclass(frozen=True)
class Type(ABC):
    """Base class for all boundary types."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The type name for display/errors."""
        pass

    @abstractmethod
    def to_wire(self) -> Any:
        """The engine's serialised form of this type."""
        pass

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PrimitiveType(Type):
    """A primitive type (string, boolean, number, time)."""
    _name: str
    tag: str

    @property
    def name(self) -> str:
        return self._name

    def to_wire(self) -> Any:
        return self.tag


@dataclass(frozen=True)
class VarType(Type):
    """A type variable the engine has not (or cannot) pin down."""
    var_name: str

    @property
    def name(self) -> str:
        return f"'{self.var_name}"

    def to_wire(self) -> Any:
        return {"Var": self.var_name}


@dataclass(frozen=True)
class ListType(Type):
    """A list type: list<T>."""
    element_type: Type

    @property
    def name(self) -> str:
        return f"list<{self.element_type.name}>"

    def to_wire(self) -> Any:
        return {"List": self.element_type.to_wire()}


@dataclass(frozen=True)
class Field:
    """One record field: its type and whether it may be omitted."""
    type: Type
    optional: bool = False


@dataclass(frozen=True)
class RecordType(Type):
    """
    A record type.

    A closed record (``extensible=False``) permits only its declared fields;
    an open one tolerates extras. Optionality is per field.
    Fields are kept sorted by name so equality ignores declaration order.
    """
    fields: Tuple[Tuple[str, Field], ...]
    extensible: bool = False

    @property
    def name(self) -> str:
        parts = []
        for field_name, fld in self.fields:
            mark = "?" if fld.optional else ""
            parts.append(f"{field_name}{mark}: {fld.type.name}")
        if self.extensible:
            parts.append("...")
        return "{" + ", ".join(parts) + "}"

    @property
    def field_map(self) -> Dict[str, Field]:
        return dict(self.fields)

    def to_wire(self) -> Any:
        return {"Record": [
            self.extensible,
            {n: {"optional": f.optional, "output": f.type.to_wire()} for n, f in self.fields},
        ]}


@dataclass(frozen=True)
class BlockType(Type):
    """A callback type."""
    param_types: Tuple[Type, ...]
    return_type: Type

    @property
    def name(self) -> str:
        params = ", ".join(t.name for t in self.param_types)
        return f"({params}) -> {self.return_type.name}"

    def to_wire(self) -> Any:
        return {"Block": [[t.to_wire() for t in self.param_types], self.return_type.to_wire()]}


# =============================================================================
# Built-in Type Instances
# =============================================================================

STR = PrimitiveType("string", "Str")
BOOL = PrimitiveType("boolean", "Bool")
NUM = PrimitiveType("number", "Num")
TIME = PrimitiveType("time", "Time")

# Names accepted in type expressions. Case-sensitive.
PRIMITIVE_NAMES: Dict[str, Type] = {
    "string": STR,
    "boolean": BOOL,
    "number": NUM,
    "time": TIME,
    "date": TIME,
}

_PRIMITIVE_TAGS: Dict[str, Type] = {t.tag: t for t in (STR, BOOL, NUM, TIME)}


def make_record_type(fields: Mapping[str, Field], extensible: bool = False) -> RecordType:
    """Create a record type from a field mapping (order is normalised)."""
    return RecordType(tuple(sorted(fields.items())), extensible)


def make_list_type(element_type: Type) -> ListType:
    """Create a list type with the given element type."""
    return ListType(element_type)


# =============================================================================
# Wire decoding
# =============================================================================

def type_from_wire(wire: Any) -> Type:
    """Rebuild a Type from the engine's serialised form."""
    if isinstance(wire, str):
        prim = _PRIMITIVE_TAGS.get(wire)
        if prim is None:
            raise error_unknown_type(wire)
        return prim

    if isinstance(wire, Mapping) and len(wire) == 1:
        (tag, body), = wire.items()
        if tag == "Var":
            return VarType(str(body))
        if tag == "List":
            return ListType(type_from_wire(body))
        if tag == "Record":
            extensible, fields = body
            return make_record_type(
                {n: Field(type_from_wire(f["output"]), bool(f.get("optional", False)))
                 for n, f in fields.items()},
                bool(extensible),
            )
        if tag == "Block":
            params, returns = body
            return BlockType(tuple(type_from_wire(p) for p in params), type_from_wire(returns))

    raise error_unknown_type(wire)

"""
Type introspection for compiled scripts and expressions.

Provides the source positions the engine attaches to type errors, the
``TypeInfo`` returned by ``Script.type_info()`` / ``Evaluator.type_of()``,
and a JSON Schema export of types, which is what input forms are built
from:

    info = script.type_info()
    if not info.errors:
        schema = input_schema(info)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors import Diagnostic, ErrorSeverity
from .types import (
    Type, PrimitiveType, VarType, ListType, RecordType, BlockType,
    STR, BOOL, NUM, TIME, type_from_wire,
)


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"

    def to_json(self) -> dict:
        return {"line": self.line, "column": self.column, "offset": self.offset}

    @classmethod
    def from_wire(cls, wire: Mapping[str, Any]) -> "SourceLocation":
        return cls(int(wire["line"]), int(wire["column"]), int(wire.get("offset", 0)))


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"

    def to_json(self) -> dict:
        return {"start": self.start.to_json(), "end": self.end.to_json()}

    @classmethod
    def from_wire(cls, wire: Mapping[str, Any]) -> "SourceSpan":
        return cls(SourceLocation.from_wire(wire["start"]), SourceLocation.from_wire(wire["end"]))


@dataclass
class TypeInfo:
    """Inferred input types, output type (when known) and type errors."""
    inputs: Dict[str, Type] = field(default_factory=dict)
    errors: List[Diagnostic] = field(default_factory=list)
    output: Optional[Type] = None

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def format_errors(self) -> str:
        return "\n\n".join(d.format() for d in self.errors)


def diagnostic_from_wire(wire: Mapping[str, Any], source: str = "") -> Diagnostic:
    """Convert one engine type error into a Diagnostic."""
    span = SourceSpan.from_wire(wire["span"]) if wire.get("span") else None
    source_line = None
    if span is not None and source:
        lines = source.split("\n")
        if 1 <= span.start.line <= len(lines):
            source_line = lines[span.start.line - 1]
    return Diagnostic(
        code=str(wire.get("kind", "TypeError")),
        message=str(wire.get("description", "")),
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )


def type_info_from_wire(payload: Mapping[str, Any], source: str = "") -> TypeInfo:
    """Build a TypeInfo from a ``type_info`` / ``type_of`` payload."""
    inputs = {name: type_from_wire(t) for name, t in payload.get("inputs", {}).items()}
    errors = [diagnostic_from_wire(e, source) for e in payload.get("errors", [])]
    output = payload.get("output")
    return TypeInfo(inputs, errors, type_from_wire(output) if output is not None else None)


# =============================================================================
# JSON Schema export
# =============================================================================

_PRIMITIVE_SCHEMAS = {
    NUM: {"type": "number"},
    STR: {"type": "string"},
    BOOL: {"type": "boolean"},
    TIME: {"type": "number"},   # milliseconds since the epoch
}


def to_json_schema(t: Type) -> Dict[str, Any]:
    """Describe the values a type admits as JSON Schema."""
    if isinstance(t, PrimitiveType):
        return dict(_PRIMITIVE_SCHEMAS[t])
    if isinstance(t, ListType):
        return {"type": "array", "items": to_json_schema(t.element_type)}
    if isinstance(t, RecordType):
        schema: Dict[str, Any] = {
            "type": "object",
            "required": [n for n, f in t.fields if not f.optional],
            "properties": {n: to_json_schema(f.type) for n, f in t.fields},
        }
        if not schema["required"]:
            del schema["required"]
        if not t.extensible:
            schema["additionalProperties"] = False
        return schema
    if isinstance(t, VarType):
        return {"type": ["string", "number", "boolean"]}
    if isinstance(t, BlockType):
        raise ValueError(f"callback type {t.name} has no JSON schema")
    raise ValueError(f"unhandled type: {t!r}")


def input_schema(info: TypeInfo, title: str = "Inputs") -> Dict[str, Any]:
    """Object schema for all inputs of a script; every input is required."""
    names = list(info.inputs)
    schema: Dict[str, Any] = {
        "type": "object",
        "title": title,
        "properties": {n: to_json_schema(info.inputs[n]) for n in names},
    }
    if names:
        schema["required"] = names
    return schema

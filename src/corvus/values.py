"""
Value codec: native Python values <-> the engine's tagged values.

Wire values are externally tagged dictionaries:
    {"Prim": {"Number": 1.5}}    {"Prim": {"String": "hi"}}
    {"Prim": {"Boolean": True}}  {"Prim": {"Time": 1700000000000}}
    {"List": [...]}              {"Record": {"name": ...}}

Classification is structural and closed: anything outside the recognised
shapes, ``None`` included, raises InvalidValueError.
"""

import dataclasses
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from .errors import (
    error_invalid_value, error_invalid_record_key, error_malformed_wire_value,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)

WireValue = Dict[str, Any]


# =============================================================================
# Time helpers
# =============================================================================

def to_millis(moment: date) -> int:
    """Milliseconds since the epoch. Naive datetimes and dates are taken as UTC."""
    if not isinstance(moment, datetime):
        moment = datetime.combine(moment, time(), tzinfo=timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // _MILLISECOND


def from_millis(millis: int) -> datetime:
    """Inverse of to_millis; always returns an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=millis)


# =============================================================================
# Encoding
# =============================================================================

def prim(kind: str, scalar: Any) -> WireValue:
    return {"Prim": {kind: scalar}}


def encode(value: Any, path: str = "") -> WireValue:
    """Convert a native value into a wire value."""
    if value is None:
        raise error_invalid_value(value, path)

    # bool before numbers: bool is an int subclass
    if isinstance(value, bool):
        return prim("Boolean", value)
    if isinstance(value, (int, float)):
        return prim("Number", value)
    if isinstance(value, str):
        return prim("String", value)
    if isinstance(value, date):
        return prim("Time", to_millis(value))

    if isinstance(value, (list, tuple)):
        return {"List": [encode(v, f"{path}[{i}]") for i, v in enumerate(value)]}

    if isinstance(value, Mapping):
        return {"Record": _encode_fields(value.items(), path)}

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        items = ((f.name, getattr(value, f.name)) for f in dataclasses.fields(value))
        return {"Record": _encode_fields(items, path)}

    raise error_invalid_value(value, path)


def _encode_fields(items, path: str) -> Dict[str, WireValue]:
    out = {}
    for key, v in items:
        if not isinstance(key, str):
            raise error_invalid_record_key(key, path)
        out[key] = encode(v, f"{path}.{key}" if path else key)
    return out


def encode_inputs(inputs: Optional[Mapping[str, Any]]) -> Dict[str, WireValue]:
    """Encode a name -> value mapping of script inputs."""
    if not inputs:
        return {}
    return _encode_fields(inputs.items(), "")


# =============================================================================
# Decoding
# =============================================================================

def decode(value: Any, block: Any = None, owner: Any = None) -> Any:
    """
    Convert a wire value into a native value.

    When the engine hands over a callback handle alongside the value, the
    result is a Block created and adopted by ``owner`` instead.
    """
    if block is not None:
        if owner is None:
            raise ValueError("decoding a callback requires an owner")
        return owner.wrap_block(block)

    if not isinstance(value, Mapping) or len(value) != 1:
        raise error_malformed_wire_value(value)

    (tag, body), = value.items()
    if tag == "Prim":
        if not isinstance(body, Mapping) or len(body) != 1:
            raise error_malformed_wire_value(value)
        (kind, scalar), = body.items()
        if kind == "Time":
            return from_millis(scalar)
        if kind in ("Number", "String", "Boolean"):
            return scalar
        raise error_malformed_wire_value(value)
    if tag == "List":
        if not isinstance(body, (list, tuple)):
            raise error_malformed_wire_value(value)
        return [decode(v) for v in body]
    if tag == "Record":
        if not isinstance(body, Mapping):
            raise error_malformed_wire_value(value)
        return {k: decode(v) for k, v in body.items()}

    raise error_malformed_wire_value(value)

"""
Corvus host-layer exceptions and diagnostics.

Error code ranges:
- E1xx: Value codec errors
- E2xx: Type registry errors
- E3xx: Function builder errors
- E4xx: Argument accessor errors
- E5xx: Resource lifecycle errors
- E6xx: Errors reported by the engine
- E7xx: Configuration errors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .introspection import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass
class Diagnostic:
    """A single diagnostic message (host error or engine type error)."""
    code: str                       # E101, E201, or an engine error kind
    message: str                    # Human-readable message
    severity: ErrorSeverity = ErrorSeverity.ERROR
    span: Optional["SourceSpan"] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        parts.append(header)

        # Source line with caret
        if show_source and self.span is not None and self.source_line is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            if self.span.start.line == self.span.end.line:
                end_col = self.span.end.column
            else:
                end_col = len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        out = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            out["range"] = self.span.to_json()
        return out


class CorvusError(Exception):
    """Base exception for the host layer.

    ``str(error)`` is always the bare message so that engine messages pass
    through unmodified; use ``error.diagnostic.format()`` for a decorated form.
    """

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.message


class InvalidValueError(CorvusError):
    """A native value could not cross the boundary (E1xx)."""
    pass


class UnknownTypeError(CorvusError):
    """A type expression could not be resolved (E201)."""
    pass


class DuplicateAliasError(CorvusError):
    """A type alias was defined twice in one registry (E202)."""
    pass


class BuilderError(CorvusError):
    """A host function declaration is incomplete or malformed (E3xx)."""
    pass


class MissingArgumentError(CorvusError):
    """A demanded argument was not supplied at the call site (E401)."""
    pass


class UnknownArgumentNameError(CorvusError):
    """An argument name was never declared for the function (E402)."""
    pass


class UseAfterDestroyError(CorvusError):
    """An engine resource was used after it was released (E5xx)."""
    pass


class EngineError(CorvusError):
    """The engine reported a failure (E6xx)."""
    pass


class ConfigurationError(CorvusError):
    """Configuration could not be loaded or an engine could not be created (E7xx)."""
    pass


# --- Value codec errors ---

def _describe(value: Any) -> str:
    if value is None:
        return "None"
    return f"{type(value).__name__} {value!r}"


def error_invalid_value(value: Any, path: str = "") -> InvalidValueError:
    """E101: Value cannot be encoded."""
    where = f" at {path}" if path else ""
    hints = []
    if value is None:
        hints.append("absent values cannot cross the boundary; pass an explicit value")
    diag = Diagnostic(
        code="E101",
        message=f"cannot encode {_describe(value)}{where}",
        hints=hints,
    )
    return InvalidValueError(diag)


def error_invalid_record_key(key: Any, path: str = "") -> InvalidValueError:
    """E102: Record keys must be strings."""
    where = f" at {path}" if path else ""
    diag = Diagnostic(
        code="E102",
        message=f"record keys must be strings, found {_describe(key)}{where}",
    )
    return InvalidValueError(diag)


def error_malformed_wire_value(value: Any) -> InvalidValueError:
    """E103: The engine produced a value this layer cannot decode."""
    diag = Diagnostic(
        code="E103",
        message=f"malformed engine value: {value!r}",
    )
    return InvalidValueError(diag)


# --- Type registry errors ---

def error_unknown_type(expr: Any) -> UnknownTypeError:
    """E201: Unknown type name or unrecognised type expression."""
    if isinstance(expr, str):
        message = f"unknown type '{expr}'"
        hints = ["primitive types: string, boolean, number, time, date"]
    else:
        message = f"cannot resolve type expression {expr!r}"
        hints = []
    diag = Diagnostic(code="E201", message=message, hints=hints)
    return UnknownTypeError(diag)


def error_duplicate_alias(name: str) -> DuplicateAliasError:
    """E202: Alias already defined."""
    diag = Diagnostic(
        code="E202",
        message=f"type alias '{name}' is already defined",
    )
    return DuplicateAliasError(diag)


# --- Function builder errors ---

def error_builder(function_name: str, problem: str) -> BuilderError:
    """E301: Malformed function declaration."""
    diag = Diagnostic(
        code="E301",
        message=f"function '{function_name}': {problem}",
    )
    return BuilderError(diag)


# --- Argument accessor errors ---

def error_missing_argument(name: str) -> MissingArgumentError:
    """E401: Required argument absent."""
    diag = Diagnostic(
        code="E401",
        message=f"missing argument '{name}'",
        hints=["use maybe(name, fallback) for arguments that may be omitted"],
    )
    return MissingArgumentError(diag)


def error_unknown_argument_name(name: str, function_name: str) -> UnknownArgumentNameError:
    """E402: Argument never declared."""
    diag = Diagnostic(
        code="E402",
        message=f"function '{function_name}' declares no argument '{name}'",
    )
    return UnknownArgumentNameError(diag)


# --- Lifecycle errors ---

def error_use_after_destroy(kind: str) -> UseAfterDestroyError:
    """E501: Resource already released."""
    diag = Diagnostic(
        code="E501",
        message=f"{kind} has been destroyed",
    )
    return UseAfterDestroyError(diag)


# --- Engine errors ---

def error_engine(message: str) -> EngineError:
    """E601: Failure reported by the engine (message kept verbatim)."""
    return EngineError(Diagnostic(code="E601", message=message))


# --- Configuration errors ---

def error_configuration(message: str) -> ConfigurationError:
    """E701: Bad configuration or engine spec."""
    return ConfigurationError(Diagnostic(code="E701", message=message))

"""
Host-side bindings for the Corvus expression engine.

This module provides:
- Value codec: native Python values <-> engine values
- Type registry: type expressions and named aliases
- Function builder: typed host functions callable from expressions
- Namespace / Script / Evaluator: engine resources with explicit lifetimes
- Args / Block: argument access and callbacks inside host functions

Usage:
    from corvus import Namespace, engine_from_config

    engine = engine_from_config()
    with Namespace(engine) as ns:
        def add(fn):
            fn.require_arg("add", "number").require_arg("to", "number")
            fn.never_fails().returns("number")
            fn.implement(lambda args: args.demand("add") + args.demand("to"))

        ns.define(add)
        ns.compile("add(2, to=3)").eval()   # 5
"""

from .errors import (
    ErrorSeverity,
    Diagnostic,
    CorvusError,
    InvalidValueError,
    UnknownTypeError,
    DuplicateAliasError,
    BuilderError,
    MissingArgumentError,
    UnknownArgumentNameError,
    UseAfterDestroyError,
    EngineError,
    ConfigurationError,
)

from .types import (
    Type,
    PrimitiveType,
    VarType,
    ListType,
    Field,
    RecordType,
    BlockType,
    STR, BOOL, NUM, TIME,
    type_from_wire,
)

from .registry import (
    TypeRegistry,
    list_of,
    variable,
    block,
    optional,
    required,
    record,
)

from .values import (
    encode,
    decode,
)

from .signatures import (
    ArgSpec,
    FunctionSignature,
    FunctionBuilder,
    FunctionDefinition,
)

from .engine import (
    Engine,
    unwrap,
    load_engine,
    engine_from_config,
)

from .introspection import (
    SourceLocation,
    SourceSpan,
    TypeInfo,
    to_json_schema,
    input_schema,
)

from .config import (
    CorvusConfig,
    load_config,
)

from .runtime import (
    Namespace,
    Script,
    Evaluator,
    Args,
    Block,
)

__all__ = [
    # Errors
    'ErrorSeverity',
    'Diagnostic',
    'CorvusError',
    'InvalidValueError',
    'UnknownTypeError',
    'DuplicateAliasError',
    'BuilderError',
    'MissingArgumentError',
    'UnknownArgumentNameError',
    'UseAfterDestroyError',
    'EngineError',
    'ConfigurationError',

    # Types
    'Type',
    'PrimitiveType',
    'VarType',
    'ListType',
    'Field',
    'RecordType',
    'BlockType',
    'STR', 'BOOL', 'NUM', 'TIME',
    'type_from_wire',

    # Type expressions
    'TypeRegistry',
    'list_of',
    'variable',
    'block',
    'optional',
    'required',
    'record',

    # Values
    'encode',
    'decode',

    # Signatures
    'ArgSpec',
    'FunctionSignature',
    'FunctionBuilder',
    'FunctionDefinition',

    # Engine
    'Engine',
    'unwrap',
    'load_engine',
    'engine_from_config',

    # Introspection
    'SourceLocation',
    'SourceSpan',
    'TypeInfo',
    'to_json_schema',
    'input_schema',

    # Configuration
    'CorvusConfig',
    'load_config',

    # Runtime
    'Namespace',
    'Script',
    'Evaluator',
    'Args',
    'Block',
]

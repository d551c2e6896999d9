#!/usr/bin/env python3
"""
Command line front end for the Corvus engine.

Usage:
    python -m corvus eval SOURCE [--input NAME=VALUE ...]
    python -m corvus typeof SOURCE

The engine is chosen by --engine, the CORVUS_ENGINE environment variable or
the ``engine`` key of the configuration file (see corvus.config).

Examples:
    # Evaluate an expression with inputs
    python -m corvus eval "price * quantity" --input price=2.5 --input quantity=4

    # Show inferred input and output types
    python -m corvus typeof "price * quantity"
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from .config import load_config
from .errors import CorvusError
from .engine import load_engine
from .introspection import TypeInfo
from .runtime import Evaluator, Block


def parse_param(param_str: str) -> tuple:
    """Parse a parameter string like 'name=value' into (name, typed_value)."""
    if '=' not in param_str:
        raise ValueError(f"Invalid input format: {param_str} (expected name=value)")

    name, value_str = param_str.split('=', 1)
    name = name.strip()
    value_str = value_str.strip()

    if value_str.lower() == 'true':
        return (name, True)
    elif value_str.lower() == 'false':
        return (name, False)

    try:
        return (name, int(value_str))
    except ValueError:
        pass

    try:
        return (name, float(value_str))
    except ValueError:
        pass

    # Lists and records as JSON
    if value_str[:1] in ('[', '{'):
        try:
            return (name, json.loads(value_str))
        except json.JSONDecodeError:
            pass

    # Strip quotes if present
    if (value_str.startswith('"') and value_str.endswith('"')) or \
       (value_str.startswith("'") and value_str.endswith("'")):
        value_str = value_str[1:-1]

    return (name, value_str)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Block):
        return "<block>"
    raise TypeError(f"not JSON serializable: {type(value).__name__}")


def format_type_info(info: TypeInfo) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "inputs": {name: t.name for name, t in info.inputs.items()},
        "errors": [d.to_json() for d in info.errors],
    }
    if info.output is not None:
        out["output"] = info.output.name
    return out


def cmd_eval(evaluator: Evaluator, args) -> int:
    """Evaluate an expression and print the result as JSON."""
    inputs = dict(parse_param(p) for p in args.input or [])
    result = evaluator.eval(args.source, inputs)
    print(json.dumps(result, default=_json_default, indent=2))
    return 0


def cmd_typeof(evaluator: Evaluator, args) -> int:
    """Print inferred input/output types and type errors."""
    info = evaluator.type_of(args.source)
    print(json.dumps(format_type_info(info), indent=2))
    if info.has_errors:
        print(info.format_errors(), file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corvus",
        description="Evaluate and inspect Corvus expressions",
    )
    parser.add_argument("--engine", help="engine spec: module or module:factory")
    parser.add_argument("--config", type=Path, help="path to a YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    eval_parser = subparsers.add_parser("eval", help="evaluate an expression")
    eval_parser.add_argument("source", help="expression source")
    eval_parser.add_argument("--input", "-i", action="append", metavar="NAME=VALUE",
                             help="input value (repeatable)")
    eval_parser.set_defaults(func=cmd_eval)

    typeof_parser = subparsers.add_parser("typeof", help="show inferred types")
    typeof_parser.add_argument("source", help="expression source")
    typeof_parser.set_defaults(func=cmd_typeof)

    return parser


def main(argv: List[str] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        if args.engine:
            config.engine = args.engine
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else config.log_level_number,
            format="%(levelname)s %(name)s: %(message)s",
        )
        engine = load_engine(config.engine)
        with Evaluator(engine) as evaluator:
            return args.func(evaluator, args)
    except (CorvusError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

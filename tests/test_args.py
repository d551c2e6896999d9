"""
Tests for the Args accessor, built directly over raw engine arguments.
"""

import ast

import pytest

from corvus import (
    Args, Block, FunctionBuilder, encode,
    MissingArgumentError, UnknownArgumentNameError, UseAfterDestroyError,
)

from toy_engine import Closure, NamespaceState


@pytest.fixture
def signature(ns):
    return (
        FunctionBuilder(ns.types)
        .require_arg("scale", "number")
        .allow_arg("x", "number")
        .allow_arg_repeated("extra", "string")
        .allow_arg("each", "number")
        .returns("number")
        .implement(lambda args: 0)
        .validate()
        .signature
    )


def closure_handle(engine, body="v * 2"):
    tree = ast.parse(body, mode="eval")
    return engine._new_block(Closure(["v"], tree.body, {}), NamespaceState())


def make_args(ns, signature, **supplied):
    raw = []
    for name, value in supplied.items():
        values = value if isinstance(value, list) else [value]
        for v in values:
            raw.append((ns.symbols.intern(name), encode(v), None))
    return Args(ns.engine, raw, ns.symbols, signature)


class TestAccess:
    """Test demand / maybe / iteration."""

    def test_demand(self, ns, signature):
        args = make_args(ns, signature, scale=3)
        assert args.demand("scale") == 3

    def test_demand_missing(self, ns, signature):
        args = make_args(ns, signature, scale=3)
        with pytest.raises(MissingArgumentError) as exc:
            args.demand("x")
        assert exc.value.code == "E401"

    def test_maybe_fallback(self, ns, signature):
        args = make_args(ns, signature, scale=3)
        assert args.maybe("x", 42) == 42

    def test_maybe_present(self, ns, signature):
        args = make_args(ns, signature, scale=3, x=7)
        assert args.maybe("x", 42) == 7

    def test_maybe_requires_fallback(self, ns, signature):
        args = make_args(ns, signature, scale=3)
        with pytest.raises(TypeError):
            args.maybe("x")

    def test_undeclared_name(self, ns, signature):
        args = make_args(ns, signature, scale=3)
        with pytest.raises(UnknownArgumentNameError) as exc:
            args.maybe("y", 0)
        assert exc.value.code == "E402"
        with pytest.raises(UnknownArgumentNameError):
            args.demand("y")

    def test_variadic_collects_all(self, ns, signature):
        args = make_args(ns, signature, scale=1, extra=["a", "b", "c"])
        assert args.demand("extra") == ["a", "b", "c"]

    def test_variadic_absent(self, ns, signature):
        args = make_args(ns, signature, scale=1)
        assert args.maybe("extra", []) == []

    def test_iteration_covers_supplied_only(self, ns, signature):
        args = make_args(ns, signature, scale=2, extra=["a", "b"])
        assert list(args) == [("scale", 2), ("extra", "a"), ("extra", "b")]
        assert len(args) == 3
        assert "scale" in args
        assert "x" not in args

    def test_iteration_is_restartable(self, ns, signature):
        args = make_args(ns, signature, scale=2, x=1)
        first = iter(args)
        assert next(first) == ("scale", 2)
        assert list(args) == [("scale", 2), ("x", 1)]

    def test_use_after_release(self, ns, signature):
        args = make_args(ns, signature, scale=2)
        args.release()
        with pytest.raises(UseAfterDestroyError):
            args.demand("scale")
        with pytest.raises(UseAfterDestroyError):
            list(args)
        with pytest.raises(UseAfterDestroyError):
            len(args)
        with pytest.raises(UseAfterDestroyError):
            "scale" in args
        with pytest.raises(UseAfterDestroyError):
            args.release()
        assert args.released


class TestBlockOwnership:
    """Args owns every callback it was handed."""

    def test_decoded_block_is_callable(self, engine, ns, signature):
        handle = closure_handle(engine)
        args = Args(engine, [(ns.symbols.intern("scale"), None, handle)], ns.symbols, signature)
        fn = args.demand("scale")
        assert isinstance(fn, Block)
        assert fn(21) == 42
        args.release()
        assert handle not in engine.blocks
        with pytest.raises(UseAfterDestroyError):
            fn(1)

    def test_same_block_decoded_once(self, engine, ns, signature):
        handle = closure_handle(engine)
        args = Args(engine, [(ns.symbols.intern("scale"), None, handle)], ns.symbols, signature)
        assert args.demand("scale") is args.maybe("scale", None)
        args.release()
        assert engine.blocks == {}

    def test_undecoded_blocks_are_released(self, engine, ns, signature):
        handles = [closure_handle(engine), closure_handle(engine)]
        raw = [(ns.symbols.intern("scale"), None, handles[0]),
               (ns.symbols.intern("each"), None, handles[1])]
        args = Args(engine, raw, ns.symbols, signature)
        args.demand("scale")
        args.release()
        assert engine.blocks == {}

    def test_blocks_released_when_iteration_abandoned(self, engine, ns, signature):
        raw = [(ns.symbols.intern("scale"), encode(1), None),
               (ns.symbols.intern("each"), None, closure_handle(engine))]
        args = Args(engine, raw, ns.symbols, signature)
        for name, value in args:
            break
        args.release()
        assert engine.blocks == {}

    def test_iteration_tracks_blocks(self, engine, ns, signature):
        raw = [(ns.symbols.intern("each"), None, closure_handle(engine))]
        args = Args(engine, raw, ns.symbols, signature)
        (name, fn), = list(args)
        assert name == "each"
        assert fn(1) == 2
        args.release()
        assert fn.destroyed
        assert engine.blocks == {}

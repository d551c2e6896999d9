import pytest

from corvus import Namespace

from toy_engine import ToyEngine


@pytest.fixture
def engine():
    return ToyEngine()


@pytest.fixture
def ns(engine):
    namespace = Namespace(engine)
    yield namespace
    if not namespace.destroyed:
        namespace.destroy()


@pytest.fixture
def define_add(ns):
    """Register add(add: number, to: number) -> number in ``ns``."""
    def define(total=True, implementation=None):
        def build(fn):
            fn.require_arg("add", "number")
            fn.require_arg("to", "number")
            if total:
                fn.never_fails()
            fn.returns("number")
            fn.implement(implementation or (lambda args: args.demand("add") + args.demand("to")))
        return ns.define(build)
    return define

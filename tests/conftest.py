import math
from dataclasses import astuple, is_dataclass

import pytest

from markscale.ir import Binary, Call, Component, Constant, FieldRef, Unary, Variable
from markscale.typesys import component_names

_BINARY = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
}


def _lift(fn, a, b):
    if isinstance(a, tuple) and isinstance(b, tuple):
        return tuple(fn(x, y) for x, y in zip(a, b))
    if isinstance(a, tuple):
        return tuple(fn(x, b) for x in a)
    if isinstance(b, tuple):
        return tuple(fn(a, y) for y in b)
    return fn(a, b)


def _mix(a, b, t):
    return _lift(lambda x, y: x + (y - x) * t, a, b)


def _evaluate(expr, env):
    if isinstance(expr, Constant):
        return astuple(expr.value) if is_dataclass(expr.value) else expr.value
    if isinstance(expr, Variable):
        return env[expr.name]
    if isinstance(expr, FieldRef):
        return env[expr.field]
    if isinstance(expr, Unary):
        operand = _evaluate(expr.operand, env)
        return _lift(lambda x, _: -x, operand, 0)
    if isinstance(expr, Binary):
        return _lift(_BINARY[expr.op], _evaluate(expr.left, env), _evaluate(expr.right, env))
    if isinstance(expr, Call):
        args = [_evaluate(arg, env) for arg in expr.args]
        if expr.name == "mix":
            return _mix(*args)
        if expr.name in ("Vector2", "Vector3", "Vector4", "Color"):
            return tuple(args)
        return getattr(math, expr.name)(*args)
    if isinstance(expr, Component):
        value = _evaluate(expr.value, env)
        return value[component_names(expr.value.value_type).index(expr.field)]
    raise AssertionError(f"Cannot evaluate {expr!r}")


@pytest.fixture
def evaluate():
    """Reference evaluator standing in for downstream expression evaluation."""

    def run(expr, **env):
        return _evaluate(expr, env)

    return run

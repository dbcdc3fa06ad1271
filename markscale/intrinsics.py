"""Type rules for operators and intrinsic functions of the expression language.

Both the IR builder (:mod:`markscale.construct`) and the expression compiler
resolve result types through this table, so a node built by hand and the
same node compiled from source always agree on ``value_type``.
"""

from typing import Callable, Dict, Optional, Sequence, Tuple

from markscale.errors import ExpressionTypeError
from markscale.typesys import ValueType, is_numeric, is_vector_like

_VECTORS = (ValueType.VECTOR2, ValueType.VECTOR3, ValueType.VECTOR4)

_SCALAR_FUNCTIONS = ("log", "exp", "sqrt", "sin", "cos", "tan", "floor", "ceil")

CONSTRUCTOR_ARITY: Dict[str, Tuple[int, ...]] = {
    "Vector2": (2,),
    "Vector3": (3,),
    "Vector4": (4,),
    "Color": (3, 4),
}


def _describe(types: Sequence[ValueType]) -> str:
    return ", ".join(t.value for t in types)


def _mismatch(name: str, arg_types: Sequence[ValueType]) -> ExpressionTypeError:
    return ExpressionTypeError(
        f"{name}(...) is not defined for argument types ({_describe(arg_types)})."
    )


def _expect_arity(name: str, arg_types: Sequence[ValueType], *counts: int) -> None:
    if len(arg_types) in counts:
        return
    expected = " or ".join(str(count) for count in counts)
    raise ExpressionTypeError(
        f"{name}(...) expects {expected} arguments, got {len(arg_types)}."
    )


def _unify(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    """Return the common type of numeric/vector arguments."""
    if all(is_numeric(t) for t in arg_types):
        return ValueType.FLOAT
    first = arg_types[0]
    if is_vector_like(first) and all(t == first for t in arg_types):
        return first
    raise _mismatch(name, arg_types)


def binary_result_type(op: str, left: ValueType, right: ValueType) -> ValueType:
    if is_numeric(left) and is_numeric(right):
        if left == right == ValueType.INT and op != "/":
            return ValueType.INT
        return ValueType.FLOAT
    if is_vector_like(left) and left == right:
        return left
    if op in ("*", "/") and is_vector_like(left) and is_numeric(right):
        return left
    if op == "*" and is_numeric(left) and is_vector_like(right):
        return right
    raise ExpressionTypeError(
        f"Operator '{op}' is not defined for {left.value} and {right.value}."
    )


def unary_result_type(op: str, operand: ValueType) -> ValueType:
    if is_numeric(operand) or is_vector_like(operand):
        return operand
    raise ExpressionTypeError(f"Unary operator '{op}' is not defined for {operand.value}.")


def _scalar(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 1)
    if not is_numeric(arg_types[0]):
        raise _mismatch(name, arg_types)
    return ValueType.FLOAT


def _abs(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 1)
    return _unify(name, arg_types)


def _pow(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 2)
    if not all(is_numeric(t) for t in arg_types):
        raise _mismatch(name, arg_types)
    return ValueType.FLOAT


def _min_max(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 2)
    return _unify(name, arg_types)


def _clamp(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 3)
    result = _unify(name, arg_types[:1])
    if not all(is_numeric(t) for t in arg_types[1:]):
        raise _mismatch(name, arg_types)
    return result


def _mix(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 3)
    if not is_numeric(arg_types[2]):
        raise _mismatch(name, arg_types)
    return _unify(name, arg_types[:2])


def _length(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 1)
    if arg_types[0] not in _VECTORS:
        raise _mismatch(name, arg_types)
    return ValueType.FLOAT


def _dot(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 2)
    if arg_types[0] not in _VECTORS or arg_types[0] != arg_types[1]:
        raise _mismatch(name, arg_types)
    return ValueType.FLOAT


def _normalize(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, 1)
    if arg_types[0] not in _VECTORS:
        raise _mismatch(name, arg_types)
    return arg_types[0]


def _constructor(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    _expect_arity(name, arg_types, *CONSTRUCTOR_ARITY[name])
    if not all(is_numeric(t) for t in arg_types):
        raise _mismatch(name, arg_types)
    return ValueType(name)


_FUNCTIONS: Dict[str, Callable[[str, Sequence[ValueType]], ValueType]] = {
    **{name: _scalar for name in _SCALAR_FUNCTIONS},
    "abs": _abs,
    "pow": _pow,
    "min": _min_max,
    "max": _min_max,
    "clamp": _clamp,
    "mix": _mix,
    "length": _length,
    "dot": _dot,
    "normalize": _normalize,
    **{name: _constructor for name in CONSTRUCTOR_ARITY},
}


def is_known_function(name: str) -> bool:
    return name in _FUNCTIONS


def call_result_type(name: str, arg_types: Sequence[ValueType]) -> ValueType:
    rule: Optional[Callable[[str, Sequence[ValueType]], ValueType]] = _FUNCTIONS.get(name)
    if rule is None:
        raise ExpressionTypeError(f"Unknown function '{name}'.")
    return rule(name, list(arg_types))

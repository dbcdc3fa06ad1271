"""Builders for expression IR nodes.

Every builder accepts either an :class:`~markscale.ir.Expr` or a constant
literal and returns a node whose ``value_type`` is already resolved.
"""

from typing import Any, Optional

from markscale.binding import DataRef, literal_type
from markscale.errors import ExpressionTypeError
from markscale.intrinsics import binary_result_type, call_result_type, unary_result_type
from markscale.ir import Binary, Call, Constant, Expr, FieldRef, Unary
from markscale.typesys import TypeLike, ValueType, parse_value_type


def constant(value: Any, value_type: Optional[TypeLike] = None) -> Constant:
    if value_type is None:
        return Constant(value=value, value_type=literal_type(value))
    return Constant(value=value, value_type=parse_value_type(value_type))


def as_expr(value: Any, value_type: Optional[TypeLike] = None) -> Expr:
    """Coerce a binding value into an expression node.

    Data references become :class:`FieldRef` nodes typed by the reference
    itself, else by ``value_type``, else as float.
    """
    if isinstance(value, Expr):
        return value
    if isinstance(value, DataRef):
        ref_type = value.value_type or value_type or ValueType.FLOAT
        return FieldRef(field=value.field, value_type=parse_value_type(ref_type))
    if value is None:
        raise ExpressionTypeError("Cannot build an expression from an unbound value.")
    if value_type is not None and isinstance(value, (int, float)) and not isinstance(value, bool):
        target = parse_value_type(value_type)
        if target == ValueType.FLOAT:
            return constant(float(value), target)
    return constant(value)


def binary(op: str, left: Any, right: Any) -> Binary:
    left_expr = as_expr(left)
    right_expr = as_expr(right)
    return Binary(
        op=op,
        left=left_expr,
        right=right_expr,
        value_type=binary_result_type(op, left_expr.value_type, right_expr.value_type),
    )


def add(left: Any, right: Any) -> Binary:
    return binary("+", left, right)


def sub(left: Any, right: Any) -> Binary:
    return binary("-", left, right)


def mul(left: Any, right: Any) -> Binary:
    return binary("*", left, right)


def div(left: Any, right: Any) -> Binary:
    return binary("/", left, right)


def unary(op: str, operand: Any) -> Unary:
    operand_expr = as_expr(operand)
    return Unary(
        op=op,
        operand=operand_expr,
        value_type=unary_result_type(op, operand_expr.value_type),
    )


def neg(operand: Any) -> Unary:
    return unary("-", operand)


def call(name: str, *args: Any) -> Call:
    """Build a call to an intrinsic function, checking its signature."""
    arg_exprs = tuple(as_expr(arg) for arg in args)
    return Call(
        name=name,
        args=arg_exprs,
        value_type=call_result_type(name, [arg.value_type for arg in arg_exprs]),
    )


def func(name: str, result_type: TypeLike, *args: Any) -> Call:
    """Build a typed function or constructor call with an explicit result type."""
    return Call(
        name=name,
        args=tuple(as_expr(arg) for arg in args),
        value_type=parse_value_type(result_type),
    )


def mix(a: Any, b: Any, t: Any) -> Call:
    return call("mix", a, b, t)


def log(x: Any) -> Call:
    return call("log", x)

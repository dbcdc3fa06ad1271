import pytest

from markscale import construct
from markscale.binding import Color, DataRef, Vector2
from markscale.errors import ExpressionTypeError
from markscale.ir import Binary, Call, Constant, FieldRef, Variable
from markscale.typesys import ValueType


def test_constant_infers_literal_types():
    assert construct.constant(1.5).value_type is ValueType.FLOAT
    assert construct.constant(2).value_type is ValueType.INT
    assert construct.constant(True).value_type is ValueType.BOOL
    assert construct.constant(Vector2(1.0, 2.0)).value_type is ValueType.VECTOR2
    assert construct.constant(Color(1.0, 0.0, 0.0)).value_type is ValueType.COLOR


def test_constant_rejects_unsupported_values():
    with pytest.raises(ExpressionTypeError, match="Unsupported constant value"):
        construct.constant("red")


def test_as_expr_coerces_bindings():
    x = Variable("x", ValueType.FLOAT)
    assert construct.as_expr(x) is x
    assert construct.as_expr(3, ValueType.FLOAT) == Constant(3.0, ValueType.FLOAT)
    assert construct.as_expr(DataRef("price")) == FieldRef("price", ValueType.FLOAT)
    assert construct.as_expr(DataRef("pos", "Vector2"), ValueType.FLOAT) == FieldRef(
        "pos", ValueType.VECTOR2
    )


def test_as_expr_rejects_unbound_value():
    with pytest.raises(ExpressionTypeError, match="unbound value"):
        construct.as_expr(None)


def test_arithmetic_builders_resolve_types():
    x = Variable("x", ValueType.FLOAT)
    node = construct.add(x, 1.0)
    assert isinstance(node, Binary)
    assert node.op == "+"
    assert node.value_type is ValueType.FLOAT
    assert construct.div(construct.constant(4), construct.constant(2)).value_type is ValueType.FLOAT
    assert construct.mul(construct.constant(4), construct.constant(2)).value_type is ValueType.INT


def test_vector_scaling_by_scalar():
    v = Variable("v", ValueType.VECTOR2)
    assert construct.mul(v, 2.0).value_type is ValueType.VECTOR2
    assert construct.mul(2.0, v).value_type is ValueType.VECTOR2
    assert construct.div(v, 2.0).value_type is ValueType.VECTOR2


def test_mismatched_operands_raise():
    v = Variable("v", ValueType.VECTOR2)
    with pytest.raises(ExpressionTypeError, match="Operator '\\+' is not defined for Vector2 and float"):
        construct.add(v, 1.0)
    with pytest.raises(ExpressionTypeError, match="Operator '/' is not defined"):
        construct.div(1.0, v)


def test_mix_and_log_nodes():
    a = Variable("a", ValueType.COLOR)
    b = Variable("b", ValueType.COLOR)
    node = construct.mix(a, b, 0.25)
    assert isinstance(node, Call)
    assert node.name == "mix"
    assert node.value_type is ValueType.COLOR

    assert construct.log(2.0).value_type is ValueType.FLOAT
    with pytest.raises(ExpressionTypeError, match="log\\(...\\) is not defined"):
        construct.log(a)


def test_func_builds_typed_call_without_signature_lookup():
    node = construct.func("Vector2", "Vector2", 1.0, Variable("y", ValueType.FLOAT))
    assert node.value_type is ValueType.VECTOR2
    assert [arg.value_type for arg in node.args] == [ValueType.FLOAT, ValueType.FLOAT]

    custom_node = construct.func("hsl", ValueType.COLOR, 0.5, 0.5, 0.5)
    assert custom_node.name == "hsl"
    assert custom_node.value_type is ValueType.COLOR


def test_call_checks_constructor_arity():
    assert construct.call("Color", 1.0, 0.5, 0.25).value_type is ValueType.COLOR
    with pytest.raises(ExpressionTypeError, match="Vector3\\(...\\) expects 3 arguments, got 2"):
        construct.call("Vector3", 1.0, 2.0)


def test_call_rejects_unknown_function():
    with pytest.raises(ExpressionTypeError, match="Unknown function 'smoothstep'"):
        construct.call("smoothstep", 0.0, 1.0, 0.5)


def test_arithmetic_reduces_to_plain_arithmetic(evaluate):
    assert evaluate(construct.add(2.0, 3.0)) == 5.0
    assert evaluate(construct.sub(2.0, 3.0)) == -1.0
    assert evaluate(construct.mul(2.0, 3.0)) == 6.0
    assert evaluate(construct.div(3.0, 2.0)) == 1.5

import pytest

from markscale.errors import ExpressionSyntaxError, ExpressionTypeError
from markscale.expression import compile_expression, parse_expression
from markscale.ir import Binary, Call, Component, Constant, FieldRef, Unary, Variable
from markscale.typesys import ValueType


def float_var(name):
    return Variable(name, ValueType.FLOAT)


def test_parse_keeps_source_and_referenced_names():
    parsed = parse_expression("  mix(lo, hi, value / span) ")
    assert parsed.source == "mix(lo, hi, value / span)"
    assert parsed.referenced_names() == ("lo", "hi", "value", "span")


def test_parse_rejects_malformed_text():
    with pytest.raises(ExpressionSyntaxError, match="Invalid expression syntax"):
        parse_expression("value*(")


def test_parse_rejects_empty_text():
    with pytest.raises(ExpressionSyntaxError, match="Expression is empty"):
        parse_expression("   ")


@pytest.mark.parametrize(
    "text, message",
    [
        ("value ** 2", "Unsupported binary operator: Pow"),
        ("not value", "Unsupported unary operator: Not"),
        ("'red'", "Only numeric constants are allowed"),
        ("value if value else 1", "Unsupported expression: IfExp"),
        ("math.log(value)", "Only plain function names can be called"),
        ("log(x=value)", "does not accept keyword arguments"),
    ],
)
def test_parse_rejects_syntax_outside_the_language(text, message):
    with pytest.raises(ExpressionSyntaxError, match=message):
        parse_expression(text)


def test_parse_error_reports_offending_code():
    with pytest.raises(ExpressionSyntaxError) as exc_info:
        parse_expression("value + 'px'")
    assert "Code: 'px'" in str(exc_info.value)


def test_compile_substitutes_environment_nodes():
    value = FieldRef("size", ValueType.FLOAT)
    expr = compile_expression(parse_expression("value * 2"), {"value": value})
    assert expr == Binary("*", value, Constant(2.0, ValueType.FLOAT), ValueType.FLOAT)


def test_compile_infers_result_type_from_declared_types():
    env = {
        "value": float_var("value"),
        "origin": Variable("origin", ValueType.VECTOR2),
    }
    expr = compile_expression(parse_expression("origin + Vector2(value, 0) * 2"), env)
    assert expr.value_type is ValueType.VECTOR2


def test_compile_unary_and_components():
    env = {"c": Variable("c", ValueType.COLOR)}
    expr = compile_expression(parse_expression("-c.r + +c.a"), env)
    assert isinstance(expr, Binary)
    assert isinstance(expr.left, Unary)
    assert expr.left.operand == Component(env["c"], "r", ValueType.FLOAT)
    assert expr.right == Component(env["c"], "a", ValueType.FLOAT)


def test_compile_unary_plus_returns_operand_unchanged():
    value = FieldRef("size", ValueType.FLOAT)
    assert compile_expression(parse_expression("+value"), {"value": value}) is value


def test_compile_unary_plus_still_checks_operand_type():
    env = {"flag": Variable("flag", ValueType.BOOL)}
    with pytest.raises(ExpressionTypeError, match="Unary operator '\\+' is not defined for bool"):
        compile_expression(parse_expression("+flag"), env)


def test_compile_calls_intrinsics():
    expr = compile_expression(parse_expression("log(value) / log(10)"), {"value": float_var("value")})
    assert isinstance(expr.left, Call)
    assert expr.left.name == "log"
    assert expr.value_type is ValueType.FLOAT


def test_compile_rejects_unknown_identifier_with_context():
    with pytest.raises(ExpressionTypeError, match="Unknown identifier 'k'") as exc_info:
        compile_expression(parse_expression("value * k"), {"value": float_var("value")})
    assert "Code: k" in str(exc_info.value)


def test_compile_error_points_at_offending_span():
    with pytest.raises(ExpressionTypeError) as exc_info:
        compile_expression(parse_expression("value * kk"), {"value": float_var("value")})
    lines = str(exc_info.value).splitlines()
    assert "Location: column 9" in lines
    assert "Expression: value * kk" in lines
    assert " " * len("Expression: value * ") + "^^" in lines


def test_syntax_error_shows_expression_line():
    with pytest.raises(ExpressionSyntaxError, match="Invalid expression syntax") as exc_info:
        parse_expression("value + * 2")
    message = str(exc_info.value)
    assert "Expression: value + * 2" in message
    assert "^" in message


def test_compile_rejects_unknown_function():
    with pytest.raises(ExpressionTypeError, match="Unknown function 'hsl'"):
        compile_expression(parse_expression("hsl(value, 1, 1)"), {"value": float_var("value")})


def test_compile_rejects_type_mismatch():
    env = {"value": float_var("value"), "p": Variable("p", ValueType.VECTOR2)}
    with pytest.raises(ExpressionTypeError, match="Operator '-' is not defined for float and Vector2"):
        compile_expression(parse_expression("value - p"), env)


def test_compile_rejects_missing_component():
    env = {"p": Variable("p", ValueType.VECTOR2)}
    with pytest.raises(ExpressionTypeError, match="Vector2 has no component 'z'"):
        compile_expression(parse_expression("p.z"), env)


def test_compile_requires_expression_bindings():
    with pytest.raises(ExpressionTypeError, match="must be bound to an expression"):
        compile_expression(parse_expression("value"), {"value": 3.0})


def test_parsed_expression_compiles_against_many_environments():
    parsed = parse_expression("value * k")
    as_float = compile_expression(parsed, {"value": float_var("value"), "k": float_var("k")})
    as_vector = compile_expression(
        parsed, {"value": float_var("value"), "k": Variable("k", ValueType.VECTOR3)}
    )
    assert as_float.value_type is ValueType.FLOAT
    assert as_vector.value_type is ValueType.VECTOR3

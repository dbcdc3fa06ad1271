import ast
from typing import Mapping

from markscale import construct
from markscale.constants import _ALLOWED_BIN
from markscale.errors import (
    ExpressionTypeError,
    expression_node_context,
    expression_source_context,
)
from markscale.intrinsics import is_known_function, unary_result_type
from markscale.ir import Component, Expr
from markscale.typesys import ValueType, component_names

from .parser import ParsedExpression


class ExpressionCompiler:
    """Type-check a parsed expression and lower it to IR nodes.

    Identifiers are looked up in the variable environment and the bound
    expression is substituted in place, so compiling against typed
    :class:`~markscale.ir.Variable` placeholders infers the result type while
    compiling against resolved attribute expressions builds the final node.
    """

    def compile(self, parsed: ParsedExpression, env: Mapping[str, Expr]) -> Expr:
        for name, value in env.items():
            if not isinstance(value, Expr):
                raise ExpressionTypeError(
                    f"Variable '{name}' must be bound to an expression, got {type(value).__name__}."
                )
        with expression_source_context(parsed.source):
            return self._compile_expr(parsed.tree.body, env)

    def _compile_expr(self, expr: ast.AST, env: Mapping[str, Expr]) -> Expr:
        with expression_node_context(expr):
            if isinstance(expr, ast.Constant):
                return construct.constant(float(expr.value), ValueType.FLOAT)

            if isinstance(expr, ast.Name):
                if expr.id not in env:
                    raise ExpressionTypeError(f"Unknown identifier '{expr.id}'.")
                return env[expr.id]

            if isinstance(expr, ast.BinOp):
                op = _ALLOWED_BIN[type(expr.op)]
                return construct.binary(
                    op,
                    self._compile_expr(expr.left, env),
                    self._compile_expr(expr.right, env),
                )

            if isinstance(expr, ast.UnaryOp):
                operand = self._compile_expr(expr.operand, env)
                if isinstance(expr.op, ast.UAdd):
                    unary_result_type("+", operand.value_type)
                    return operand
                return construct.neg(operand)

            if isinstance(expr, ast.Call):
                name = expr.func.id
                if not is_known_function(name):
                    raise ExpressionTypeError(f"Unknown function '{name}'.")
                return construct.call(
                    name, *[self._compile_expr(arg, env) for arg in expr.args]
                )

            if isinstance(expr, ast.Attribute):
                return self._compile_component(expr, env)

            raise ExpressionTypeError(f"Unsupported expression: {type(expr).__name__}")

    def _compile_component(self, expr: ast.Attribute, env: Mapping[str, Expr]) -> Component:
        value = self._compile_expr(expr.value, env)
        fields = component_names(value.value_type)
        if expr.attr not in fields:
            raise ExpressionTypeError(
                f"{value.value_type.value} has no component '{expr.attr}'."
            )
        return Component(value=value, field=expr.attr, value_type=ValueType.FLOAT)


def compile_expression(parsed: ParsedExpression, env: Mapping[str, Expr]) -> Expr:
    return ExpressionCompiler().compile(parsed, env)

import math
from dataclasses import astuple, is_dataclass

from markscale.errors import ExpressionTypeError
from markscale.ir import Binary, Call, Component, Constant, Expr, FieldRef, Unary, Variable
from markscale.typesys import ValueType


class ExpressionEmitter:
    """Render IR nodes as expression-language source text.

    Field references are emitted as bare identifiers so the surrounding mark
    code can bind them as parameters.
    """

    def emit(self, expr: Expr) -> str:
        if isinstance(expr, Constant):
            return self._emit_constant(expr)

        if isinstance(expr, Variable):
            return expr.name

        if isinstance(expr, FieldRef):
            return expr.field

        if isinstance(expr, Binary):
            return f"({self.emit(expr.left)} {expr.op} {self.emit(expr.right)})"

        if isinstance(expr, Unary):
            return f"({expr.op}{self.emit(expr.operand)})"

        if isinstance(expr, Call):
            return f"{expr.name}({', '.join(self.emit(arg) for arg in expr.args)})"

        if isinstance(expr, Component):
            return f"{self.emit(expr.value)}.{expr.field}"

        raise ExpressionTypeError(f"Unsupported expression IR node: {type(expr).__name__}")

    def _emit_constant(self, expr: Constant) -> str:
        value = expr.value
        if isinstance(value, bool):
            raise ExpressionTypeError("Boolean constants cannot be emitted as expression source.")
        if isinstance(value, (int, float)):
            text = _number(value, as_float=expr.value_type == ValueType.FLOAT)
            return f"({text})" if text.startswith("-") else text
        if is_dataclass(value):
            parts = ", ".join(_number(component, as_float=True) for component in astuple(value))
            return f"{expr.value_type.value}({parts})"
        raise ExpressionTypeError(f"Unsupported constant value: {value!r}")


def _number(value, *, as_float: bool) -> str:
    # inf and nan have no literal form in the expression language.
    if not math.isfinite(value):
        raise ExpressionTypeError(f"Non-finite constant {value!r} cannot be emitted as expression source.")
    return repr(float(value)) if as_float else repr(value)


def emit_expression(expr: Expr) -> str:
    return ExpressionEmitter().emit(expr)

"""Expression language used by custom scales.

Use :func:`parse_expression` once per expression text and
:func:`compile_expression` for each variable environment.
"""

from markscale.expression.compiler import ExpressionCompiler, compile_expression
from markscale.expression.parser import ParsedExpression, parse_expression

__all__ = [
    "ExpressionCompiler",
    "ParsedExpression",
    "compile_expression",
    "parse_expression",
]

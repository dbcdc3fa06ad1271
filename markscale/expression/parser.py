import ast
from dataclasses import dataclass
from typing import List, Tuple

from markscale.constants import _ALLOWED_BIN, _ALLOWED_UNARY
from markscale.errors import (
    ExpressionSyntaxError,
    describe_source_span,
    expression_node_context,
    expression_source_context,
)


@dataclass(frozen=True)
class ParsedExpression:
    """Syntax tree of one expression, parsed once and compiled many times."""

    source: str
    tree: ast.Expression

    def referenced_names(self) -> Tuple[str, ...]:
        """Identifiers read by the expression, in first-use order."""
        names: List[str] = []
        callees = {
            id(node.func)
            for node in ast.walk(self.tree)
            if isinstance(node, ast.Call)
        }
        for node in ast.walk(self.tree):
            if isinstance(node, ast.Name) and id(node) not in callees:
                if node.id not in names:
                    names.append(node.id)
        return tuple(names)


def _format_syntax_error(exc: SyntaxError, source: str) -> str:
    message = f"Invalid expression syntax: {exc.msg}"
    if not exc.lineno:
        return message
    start = (exc.offset or 1) - 1
    end = None
    if exc.end_offset and exc.end_lineno == exc.lineno:
        end = exc.end_offset - 1
    return "\n".join([message, *describe_source_span(source, exc.lineno, start, end)])


def _validate_node(node: ast.AST) -> None:
    with expression_node_context(node):
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise ExpressionSyntaxError("Only numeric constants are allowed.")
            return

        if isinstance(node, ast.Name):
            return

        if isinstance(node, ast.BinOp):
            if type(node.op) not in _ALLOWED_BIN:
                raise ExpressionSyntaxError(
                    f"Unsupported binary operator: {type(node.op).__name__}"
                )
            _validate_node(node.left)
            _validate_node(node.right)
            return

        if isinstance(node, ast.UnaryOp):
            if type(node.op) not in _ALLOWED_UNARY:
                raise ExpressionSyntaxError(
                    f"Unsupported unary operator: {type(node.op).__name__}"
                )
            _validate_node(node.operand)
            return

        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name):
                raise ExpressionSyntaxError("Only plain function names can be called.")
            if node.keywords:
                raise ExpressionSyntaxError(
                    f"{node.func.id}(...) does not accept keyword arguments."
                )
            for arg in node.args:
                if isinstance(arg, ast.Starred):
                    raise ExpressionSyntaxError("Argument unpacking is not supported.")
                _validate_node(arg)
            return

        if isinstance(node, ast.Attribute):
            _validate_node(node.value)
            return

        raise ExpressionSyntaxError(f"Unsupported expression: {type(node).__name__}")


def parse_expression(text: str) -> ParsedExpression:
    """Parse expression text into a reusable syntax tree.

    Raises:
        ExpressionSyntaxError: if the text is empty, malformed, or uses syntax
            outside the expression language.
    """
    if not text or not text.strip():
        raise ExpressionSyntaxError("Expression is empty.")

    source = text.strip()
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as exc:
        raise ExpressionSyntaxError(_format_syntax_error(exc, source)) from exc
    with expression_source_context(source):
        _validate_node(tree.body)

    return ParsedExpression(source=source, tree=tree)

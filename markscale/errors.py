import ast
import contextvars
from contextlib import contextmanager
from typing import Iterator, List, Optional


_CURRENT_EXPRESSION_SOURCE: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "markscale_current_expression_source", default=None
)
_CURRENT_EXPRESSION_NODE: contextvars.ContextVar[Optional[ast.AST]] = contextvars.ContextVar(
    "markscale_current_expression_node", default=None
)

_EXPRESSION_PREFIX = "Expression: "


def _pointer(source: str, line: int, start: int, end: Optional[int]) -> List[str]:
    """Render the offending expression line with a caret run under ``[start, end)``."""
    lines = source.splitlines() or [source]
    if not 1 <= line <= len(lines):
        return []
    text = lines[line - 1]
    start = max(0, min(start, len(text)))
    width = (end - start) if end is not None and end > start else 1
    label = _EXPRESSION_PREFIX if len(lines) == 1 else f"Expression (line {line}): "
    return [f"{label}{text}", " " * (len(label) + start) + "^" * width]


def describe_source_span(
    source: Optional[str],
    line: int,
    start: int,
    end: Optional[int] = None,
    code: Optional[str] = None,
) -> List[str]:
    """Return the ``Location``/``Code``/``Expression`` lines for a span of a scale expression.

    ``start`` and ``end`` are zero-based column offsets. Expressions are usually a
    single line, so the line number is only reported for multi-line sources.
    """
    multiline = source is not None and len(source.splitlines()) > 1
    if multiline:
        details = [f"Location: line {line}, column {start + 1}"]
    else:
        details = [f"Location: column {start + 1}"]
    if code:
        details.append(f"Code: {code}")
    if source is not None:
        details.extend(_pointer(source, line, start, end))
    return details


def _format_with_context(
    message: str,
    *,
    source: Optional[str] = None,
    node: Optional[ast.AST] = None,
) -> str:
    source = source if source is not None else _CURRENT_EXPRESSION_SOURCE.get()
    node = node if node is not None else _CURRENT_EXPRESSION_NODE.get()
    if node is None or getattr(node, "lineno", None) is None:
        if source is None:
            return message
        return f"{message}\n{_EXPRESSION_PREFIX}{source}"

    line = node.lineno
    start = node.col_offset
    end = node.end_col_offset if node.end_lineno == line else None
    code = ast.get_source_segment(source, node) if source is not None else None
    details = describe_source_span(source, line, start, end, code.strip() if code else None)
    return f"{message}\n" + "\n".join(details)


def format_expression_diagnostic(
    message: str,
    *,
    source: Optional[str] = None,
    node: Optional[ast.AST] = None,
) -> str:
    """Attach the scale expression (and the offending span, if known) to a warning."""
    return _format_with_context(message, source=source, node=node)


@contextmanager
def expression_source_context(source: str) -> Iterator[None]:
    token = _CURRENT_EXPRESSION_SOURCE.set(source)
    try:
        yield
    finally:
        _CURRENT_EXPRESSION_SOURCE.reset(token)


@contextmanager
def expression_node_context(node: Optional[ast.AST]) -> Iterator[None]:
    token = _CURRENT_EXPRESSION_NODE.set(node)
    try:
        yield
    finally:
        _CURRENT_EXPRESSION_NODE.reset(token)


class ScaleError(Exception):
    """Base scale-layer error."""


class ExpressionSyntaxError(ScaleError):
    """Raised when custom-scale expression text cannot be parsed."""

    def __init__(self, message: str, *, node: Optional[ast.AST] = None):
        super().__init__(_format_with_context(message, node=node))


class ExpressionTypeError(ScaleError):
    """Raised when an expression references unknown names or mismatched types."""

    def __init__(self, message: str, *, node: Optional[ast.AST] = None):
        super().__init__(_format_with_context(message, node=node))


class ScaleArityError(ScaleError, TypeError):
    """Raised when a scale is invoked with the wrong number of values."""


class ScaleConfigurationError(ScaleError):
    """Raised when a scale attribute is missing, unbound or reserved."""


class ScaleBindingError(ScaleError):
    """Raised when a scale binding is resolved more than once."""


class ScaleWarning(UserWarning):
    """Diagnostic category for recoverable scale configuration issues."""

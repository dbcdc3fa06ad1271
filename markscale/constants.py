import ast

from markscale.typesys import ValueType

DEFAULT_VALUE_TYPE = ValueType.FLOAT
DEFAULT_DOMAIN = (0.0, 1.0)
DEFAULT_RANGE = (0.0, 1.0)

# Name bound to the invocation argument inside custom-scale expressions.
RESERVED_VALUE_NAME = "value"

_ALLOWED_BIN = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
}

_ALLOWED_UNARY = {
    ast.UAdd: "+",
    ast.USub: "-",
}

__all__ = [
    "DEFAULT_VALUE_TYPE",
    "DEFAULT_DOMAIN",
    "DEFAULT_RANGE",
    "RESERVED_VALUE_NAME",
    "_ALLOWED_BIN",
    "_ALLOWED_UNARY",
]

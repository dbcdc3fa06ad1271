from dataclasses import dataclass
from typing import Any, Tuple

from markscale.typesys import ValueType


# Expressions

class Expr:
    value_type: ValueType


@dataclass(frozen=True)
class Constant(Expr):
    value: Any
    value_type: ValueType


@dataclass(frozen=True)
class Variable(Expr):
    name: str
    value_type: ValueType


@dataclass(frozen=True)
class FieldRef(Expr):
    field: str
    value_type: ValueType


@dataclass(frozen=True)
class Unary(Expr):
    op: str
    operand: Expr
    value_type: ValueType


@dataclass(frozen=True)
class Binary(Expr):
    op: str
    left: Expr
    right: Expr
    value_type: ValueType


@dataclass(frozen=True)
class Call(Expr):
    name: str
    args: Tuple[Expr, ...]
    value_type: ValueType


@dataclass(frozen=True)
class Component(Expr):
    value: Expr
    field: str
    value_type: ValueType

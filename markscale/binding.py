from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from markscale.errors import ExpressionTypeError
from markscale.ir import Expr
from markscale.typesys import ValueType, parse_value_type


class BindingKind(Enum):
    CONSTANT = "constant"
    REFERENCE = "reference"
    EXPRESSION = "expression"
    SCALE = "scale"


# Literal values

@dataclass(frozen=True)
class Vector2:
    x: float
    y: float


@dataclass(frozen=True)
class Vector3:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Vector4:
    x: float
    y: float
    z: float
    w: float


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float
    a: float = 1.0


@dataclass(frozen=True)
class DataRef:
    """Reference to a column of the external data source."""

    field: str
    value_type: Optional[ValueType] = None

    def __post_init__(self):
        if not self.field:
            raise ValueError("DataRef field name cannot be empty.")
        if self.value_type is not None:
            object.__setattr__(self, "value_type", parse_value_type(self.value_type))


Literal = Union[float, int, bool, Vector2, Vector3, Vector4, Color]
BindingValue = Union[Literal, DataRef, Expr]

_LITERAL_TYPES = {
    Vector2: ValueType.VECTOR2,
    Vector3: ValueType.VECTOR3,
    Vector4: ValueType.VECTOR4,
    Color: ValueType.COLOR,
}


def literal_type(value: Any) -> ValueType:
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, int):
        return ValueType.INT
    if isinstance(value, float):
        return ValueType.FLOAT
    value_type = _LITERAL_TYPES.get(type(value))
    if value_type is None:
        raise ExpressionTypeError(f"Unsupported constant value: {value!r}")
    return value_type


def binding_kind(value: Any) -> BindingKind:
    # Deferred import: scale.py depends on this module.
    from markscale.scale import ScaleBinding

    if isinstance(value, ScaleBinding):
        return BindingKind.SCALE
    if isinstance(value, Expr):
        return BindingKind.EXPRESSION
    if isinstance(value, DataRef):
        return BindingKind.REFERENCE
    literal_type(value)
    return BindingKind.CONSTANT


@dataclass(frozen=True)
class ScaleAttributeInfo:
    """One named input of a scale.

    ``accepts_numeric`` lets a plain number fill a slot whose declared type is
    a vector, as domain bounds of vector-valued domain/range scales do.
    """

    name: str
    value_type: ValueType
    binding: Optional[BindingValue]
    accepts_numeric: bool = False

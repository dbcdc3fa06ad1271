from enum import Enum
from typing import Tuple, Union

from markscale.errors import ExpressionTypeError


class ValueType(Enum):
    FLOAT = "float"
    INT = "int"
    BOOL = "bool"
    VECTOR2 = "Vector2"
    VECTOR3 = "Vector3"
    VECTOR4 = "Vector4"
    COLOR = "Color"


TypeLike = Union[ValueType, str]

_COMPONENTS = {
    ValueType.VECTOR2: ("x", "y"),
    ValueType.VECTOR3: ("x", "y", "z"),
    ValueType.VECTOR4: ("x", "y", "z", "w"),
    ValueType.COLOR: ("r", "g", "b", "a"),
}


def parse_value_type(value_type: TypeLike) -> ValueType:
    if isinstance(value_type, ValueType):
        return value_type
    try:
        return ValueType(value_type)
    except ValueError as exc:
        known = ", ".join(t.value for t in ValueType)
        raise ExpressionTypeError(
            f"Unknown value type '{value_type}'. Expected one of: {known}."
        ) from exc


def is_numeric(value_type: ValueType) -> bool:
    return value_type in (ValueType.FLOAT, ValueType.INT)


def is_vector_like(value_type: ValueType) -> bool:
    return value_type in _COMPONENTS


def component_names(value_type: ValueType) -> Tuple[str, ...]:
    return _COMPONENTS.get(value_type, ())

"""Prebuilt scales."""

from abc import abstractmethod
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from markscale import construct
from markscale.binding import BindingValue, ScaleAttributeInfo
from markscale.constants import DEFAULT_DOMAIN, DEFAULT_RANGE, DEFAULT_VALUE_TYPE
from markscale.ir import Expr
from markscale.scale import Scale, ScaleBinding, _attr
from markscale.typesys import TypeLike, ValueType

Bounds = Tuple[BindingValue, BindingValue]


def _bounds(value: Sequence[BindingValue], label: str) -> Bounds:
    if len(value) != 2:
        raise ValueError(f"{label} expects exactly two bounds, got {len(value)}.")
    return (value[0], value[1])


class DomainRangeScale(Scale):
    """Maps a float value from ``[d0, d1]`` onto ``[r0, r1]``."""

    def __init__(self, value_type: TypeLike = DEFAULT_VALUE_TYPE):
        super().__init__(value_type, [ValueType.FLOAT])
        self._domain: Bounds = DEFAULT_DOMAIN
        self._range: Bounds = DEFAULT_RANGE

    def get_domain(self) -> Bounds:
        return self._domain

    def set_domain(self, value: Sequence[BindingValue]) -> "DomainRangeScale":
        self._domain = _bounds(value, "domain")
        return self

    def get_range(self) -> Bounds:
        return self._range

    def set_range(self, value: Sequence[BindingValue]) -> "DomainRangeScale":
        self._range = _bounds(value, "range")
        return self

    def get_attributes(self) -> List[ScaleAttributeInfo]:
        return [
            ScaleAttributeInfo("d0", self.value_type, self._domain[0], accepts_numeric=True),
            ScaleAttributeInfo("d1", self.value_type, self._domain[1], accepts_numeric=True),
            ScaleAttributeInfo("r0", self.value_type, self._range[0]),
            ScaleAttributeInfo("r1", self.value_type, self._range[1]),
        ]

    def get_expression(self, attrs: Mapping[str, Expr], value: Expr) -> Expr:
        return construct.mix(
            _attr(attrs, "r0"), _attr(attrs, "r1"), self._position(attrs, value)
        )

    @abstractmethod
    def _position(self, attrs: Mapping[str, Expr], value: Expr) -> Expr:
        """Return the normalized position of ``value`` within the domain."""


class LinearScale(DomainRangeScale):
    def _position(self, attrs: Mapping[str, Expr], value: Expr) -> Expr:
        d0 = _attr(attrs, "d0")
        d1 = _attr(attrs, "d1")
        return construct.div(construct.sub(value, d0), construct.sub(d1, d0))


class LogScale(DomainRangeScale):
    # Non-positive bounds are left for downstream evaluation to report.
    def _position(self, attrs: Mapping[str, Expr], value: Expr) -> Expr:
        d0 = _attr(attrs, "d0")
        d1 = _attr(attrs, "d1")
        return construct.div(
            construct.log(construct.div(value, d0)),
            construct.log(construct.div(d1, d0)),
        )


class ArithmeticScale(Scale):
    """Attribute-free scale combining two values with a fixed builder."""

    def __init__(
        self,
        builder: Callable[[Expr, Expr], Expr],
        value_type: TypeLike = DEFAULT_VALUE_TYPE,
    ):
        super().__init__(value_type, [ValueType.FLOAT, ValueType.FLOAT])
        self._builder = builder

    def get_attributes(self) -> List[ScaleAttributeInfo]:
        return []

    def get_expression(self, attrs: Mapping[str, Expr], value1: Expr, value2: Expr) -> Expr:
        return self._builder(value1, value2)


class InterpolateScale(Scale):
    """Blends two values by ``t``; ``t`` outside ``[0, 1]`` extrapolates."""

    def __init__(self, value_type: TypeLike = DEFAULT_VALUE_TYPE):
        super().__init__(value_type, [value_type, value_type])
        self._t: Optional[BindingValue] = None

    def get_t(self) -> Optional[BindingValue]:
        return self._t

    def set_t(self, value: BindingValue) -> "InterpolateScale":
        self._t = value
        return self

    def get_attributes(self) -> List[ScaleAttributeInfo]:
        return [ScaleAttributeInfo("t", ValueType.FLOAT, self._t)]

    def get_expression(self, attrs: Mapping[str, Expr], value1: Expr, value2: Expr) -> Expr:
        return construct.mix(value1, value2, _attr(attrs, "t"))


def linear(value_type: TypeLike = DEFAULT_VALUE_TYPE) -> LinearScale:
    return LinearScale(value_type)


def log(value_type: TypeLike = DEFAULT_VALUE_TYPE) -> LogScale:
    return LogScale(value_type)


def interpolate(value_type: TypeLike = DEFAULT_VALUE_TYPE) -> InterpolateScale:
    return InterpolateScale(value_type)


# Common arithmetics

def add_scale() -> ArithmeticScale:
    return ArithmeticScale(construct.add)


def sub_scale() -> ArithmeticScale:
    return ArithmeticScale(construct.sub)


def mul_scale() -> ArithmeticScale:
    return ArithmeticScale(construct.mul)


def div_scale() -> ArithmeticScale:
    return ArithmeticScale(construct.div)


def _vector2(value1: Expr, value2: Expr) -> Expr:
    return construct.func("Vector2", ValueType.VECTOR2, value1, value2)


def vector2_scale() -> ArithmeticScale:
    return ArithmeticScale(_vector2, ValueType.VECTOR2)


# One-shot helpers build a fresh scale per call so every binding owns its scale.

def add(value1: Any, value2: Any) -> ScaleBinding:
    return add_scale()(value1, value2)


def sub(value1: Any, value2: Any) -> ScaleBinding:
    return sub_scale()(value1, value2)


def mul(value1: Any, value2: Any) -> ScaleBinding:
    return mul_scale()(value1, value2)


def div(value1: Any, value2: Any) -> ScaleBinding:
    return div_scale()(value1, value2)


def vector2(value1: Any, value2: Any) -> ScaleBinding:
    return vector2_scale()(value1, value2)

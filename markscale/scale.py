from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Sequence, Tuple

from markscale.binding import ScaleAttributeInfo
from markscale.errors import ScaleArityError, ScaleBindingError, ScaleConfigurationError
from markscale.ir import Expr
from markscale.typesys import TypeLike, ValueType, parse_value_type


class BindingState(Enum):
    CREATED = "created"
    RESOLVED = "resolved"


@dataclass(eq=False)
class ScaleBinding:
    """Inert record of one scale invocation.

    The outer specification compiler resolves the scale's attributes and
    calls :meth:`Scale.get_expression`; this record only carries what it needs.
    """

    scale: "Scale"
    value_type: ValueType
    argument_types: Tuple[ValueType, ...]
    argument_expressions: Tuple[Any, ...]
    state: BindingState = field(default=BindingState.CREATED)

    def mark_resolved(self) -> None:
        if self.state is BindingState.RESOLVED:
            raise ScaleBindingError("Scale binding has already been resolved.")
        self.state = BindingState.RESOLVED


class Scale(ABC):
    """Shared contract of every scale.

    A scale is invoked with value arguments to produce a
    :class:`ScaleBinding`, reports its configurable attributes in a stable
    order, and builds the final expression from resolved attributes.
    """

    def __init__(self, value_type: TypeLike, argument_types: Sequence[TypeLike]):
        self._value_type = parse_value_type(value_type)
        self._argument_types = tuple(parse_value_type(t) for t in argument_types)

    @property
    def value_type(self) -> ValueType:
        return self._value_type

    @property
    def argument_types(self) -> Tuple[ValueType, ...]:
        return self._argument_types

    @property
    def arity(self) -> int:
        return len(self._argument_types)

    def __call__(self, *args: Any) -> ScaleBinding:
        self._check_arity(args)
        return ScaleBinding(
            scale=self,
            value_type=self._binding_value_type(),
            argument_types=self._argument_types,
            argument_expressions=tuple(args),
        )

    def _binding_value_type(self) -> ValueType:
        return self._value_type

    def _check_arity(self, args: Sequence[Any]) -> None:
        if len(args) != self.arity:
            plural = "value" if self.arity == 1 else "values"
            raise ScaleArityError(
                f"{type(self).__name__} expects {self.arity} {plural}, got {len(args)}."
            )

    @abstractmethod
    def get_attributes(self) -> List[ScaleAttributeInfo]:
        """Return attribute descriptors in their stable declaration order."""

    @abstractmethod
    def get_expression(self, attrs: Mapping[str, Expr], *values: Expr) -> Expr:
        """Build the output expression from resolved attributes and values."""


def _attr(attrs: Mapping[str, Expr], name: str) -> Expr:
    try:
        return attrs[name]
    except KeyError as exc:
        raise ScaleConfigurationError(f"Missing resolved attribute '{name}'.") from exc

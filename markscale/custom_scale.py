import warnings
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from markscale.binding import BindingValue, ScaleAttributeInfo
from markscale.constants import DEFAULT_VALUE_TYPE, RESERVED_VALUE_NAME
from markscale.errors import ScaleConfigurationError, ScaleWarning, format_expression_diagnostic
from markscale.expression import ParsedExpression, compile_expression, parse_expression
from markscale.ir import Expr, Variable
from markscale.scale import Scale
from markscale.typesys import TypeLike, ValueType, parse_value_type


@dataclass(frozen=True)
class _CustomAttribute:
    value_type: ValueType
    value: Optional[BindingValue]


class CustomScale(Scale):
    """Scale defined by an expression over ``value`` and declared attributes.

    The expression text is parsed once. Its output type is inferred again on
    every invocation, against the attribute types declared at that moment.
    """

    def __init__(self, text: str):
        self._parsed: ParsedExpression = parse_expression(text)
        self._attributes: "OrderedDict[str, _CustomAttribute]" = OrderedDict()
        super().__init__(DEFAULT_VALUE_TYPE, [ValueType.FLOAT])

    @property
    def parsed(self) -> ParsedExpression:
        return self._parsed

    @property
    def value_type(self) -> ValueType:
        return self.infer_value_type()

    def get_attr(self, name: str) -> Optional[BindingValue]:
        try:
            return self._attributes[name].value
        except KeyError as exc:
            raise ScaleConfigurationError(
                f"Custom scale has no attribute '{name}'."
            ) from exc

    def set_attr(
        self,
        name: str,
        value: Optional[BindingValue],
        value_type: Optional[TypeLike] = None,
    ) -> "CustomScale":
        """Declare or update an attribute and return the scale.

        With ``value_type`` the attribute is declared (or redeclared) with that
        type. Without it only the value changes; new attributes default to
        float.
        """
        if name == RESERVED_VALUE_NAME:
            raise ScaleConfigurationError(
                f"'{RESERVED_VALUE_NAME}' is reserved for the scale input and cannot be an attribute."
            )
        if not name.isidentifier():
            raise ScaleConfigurationError(f"Attribute name '{name}' is not an identifier.")

        current = self._attributes.get(name)
        if value_type is not None:
            declared = parse_value_type(value_type)
            if current is not None and current.value_type != declared:
                warnings.warn(
                    format_expression_diagnostic(
                        f"Custom scale attribute '{name}' changed type from "
                        f"{current.value_type.value} to {declared.value}; bindings "
                        "created earlier keep the previously inferred type.",
                        source=self._parsed.source,
                    ),
                    ScaleWarning,
                    stacklevel=2,
                )
        elif current is not None:
            declared = current.value_type
        else:
            declared = DEFAULT_VALUE_TYPE

        self._attributes[name] = _CustomAttribute(value_type=declared, value=value)
        return self

    def _type_environment(self) -> Dict[str, Expr]:
        env: Dict[str, Expr] = OrderedDict()
        for name, attr in self._attributes.items():
            env[name] = Variable(name=name, value_type=attr.value_type)
        env[RESERVED_VALUE_NAME] = Variable(name=RESERVED_VALUE_NAME, value_type=ValueType.FLOAT)
        return env

    def infer_value_type(self) -> ValueType:
        return compile_expression(self._parsed, self._type_environment()).value_type

    def _binding_value_type(self) -> ValueType:
        return self.infer_value_type()

    def get_attributes(self) -> List[ScaleAttributeInfo]:
        return [
            ScaleAttributeInfo(name, attr.value_type, attr.value)
            for name, attr in self._attributes.items()
        ]

    def get_expression(self, attrs: Mapping[str, Expr], value: Expr) -> Expr:
        env: Dict[str, Expr] = OrderedDict(attrs)
        env[RESERVED_VALUE_NAME] = value
        return compile_expression(self._parsed, env)


def custom(text: str) -> CustomScale:
    return CustomScale(text)

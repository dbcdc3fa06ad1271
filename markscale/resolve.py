from typing import Any, Dict, List, Optional

from markscale import construct
from markscale.binding import BindingKind, DataRef, binding_kind, literal_type
from markscale.errors import ExpressionTypeError, ScaleBindingError, ScaleConfigurationError
from markscale.ir import Expr, FieldRef
from markscale.scale import BindingState, ScaleBinding
from markscale.typesys import ValueType, is_numeric


def _fits(actual: ValueType, slot: ValueType, accepts_numeric: bool) -> bool:
    if actual == slot:
        return True
    if slot == ValueType.FLOAT and actual == ValueType.INT:
        return True
    return accepts_numeric and is_numeric(actual)


class BindingResolver:
    """Resolve scale bindings into final expression nodes.

    A resolution pass walks the binding tree depth first. Every binding in the
    tree, nested ones included, is marked resolved only once the outermost
    expression has been built, so a failure anywhere leaves the whole tree
    ``CREATED`` and retryable.

    Subclasses override :meth:`resolve_reference` to map data references onto
    whatever the downstream evaluator expects.
    """

    _pending: Optional[List[ScaleBinding]] = None

    def resolve(self, binding: ScaleBinding) -> Expr:
        if binding.state is BindingState.RESOLVED:
            raise ScaleBindingError("Scale binding has already been resolved.")

        outermost = self._pending is None
        if outermost:
            self._pending = []
        try:
            if any(pending is binding for pending in self._pending):
                raise ScaleBindingError("Scale binding is used more than once in one resolution.")
            self._pending.append(binding)
            expr = self._build(binding)
            if outermost:
                for resolved in self._pending:
                    resolved.mark_resolved()
            return expr
        finally:
            if outermost:
                self._pending = None

    def _build(self, binding: ScaleBinding) -> Expr:
        scale = binding.scale
        owner = type(scale).__name__
        attrs: Dict[str, Expr] = {}
        for info in scale.get_attributes():
            if info.binding is None:
                raise ScaleConfigurationError(f"Attribute '{info.name}' of {owner} has no binding.")
            attrs[info.name] = self.resolve_value(
                info.binding,
                info.value_type,
                accepts_numeric=info.accepts_numeric,
                label=f"Attribute '{info.name}' of {owner}",
            )

        values = [
            self.resolve_value(argument, argument_type, label=f"Value {index} of {owner}")
            for index, (argument, argument_type) in enumerate(
                zip(binding.argument_expressions, binding.argument_types)
            )
        ]
        return scale.get_expression(attrs, *values)

    def resolve_value(
        self,
        value: Any,
        value_type: Optional[ValueType] = None,
        *,
        accepts_numeric: bool = False,
        label: str = "Value",
    ) -> Expr:
        """Resolve one binding value and check it against its slot type.

        Raises:
            ExpressionTypeError: if the resolved node's type does not fit
                ``value_type``. Integers fit float slots. Any number fits a
                vector slot when ``accepts_numeric`` is set.
        """
        kind = binding_kind(value)
        if kind is BindingKind.SCALE:
            expr = self.resolve(value)
        elif kind is BindingKind.REFERENCE:
            expr = self.resolve_reference(value, value_type)
        elif kind is BindingKind.CONSTANT and accepts_numeric and is_numeric(literal_type(value)):
            expr = construct.as_expr(value, ValueType.FLOAT)
        else:
            expr = construct.as_expr(value, value_type)

        if value_type is not None and not _fits(expr.value_type, value_type, accepts_numeric):
            raise ExpressionTypeError(
                f"{label} expects {value_type.value}, got {expr.value_type.value}."
            )
        return expr

    def resolve_reference(self, ref: DataRef, value_type: Optional[ValueType]) -> Expr:
        return FieldRef(field=ref.field, value_type=ref.value_type or value_type or ValueType.FLOAT)


def resolve_binding(binding: ScaleBinding) -> Expr:
    return BindingResolver().resolve(binding)

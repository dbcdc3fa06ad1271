"""Public Python API for markscale.

Scales map data values onto visual attributes by building expression IR
nodes. Factories live in ``markscale.scales`` and ``markscale.custom``; the
IR builder is ``markscale.construct``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from markscale.binding import (
    BindingKind,
    Color,
    DataRef,
    ScaleAttributeInfo,
    Vector2,
    Vector3,
    Vector4,
)
from markscale.custom_scale import CustomScale, custom
from markscale.emitter import ExpressionEmitter, emit_expression
from markscale.errors import (
    ExpressionSyntaxError,
    ExpressionTypeError,
    ScaleArityError,
    ScaleBindingError,
    ScaleConfigurationError,
    ScaleError,
    ScaleWarning,
)
from markscale.exporter import expression_to_dict, export_binding, scale_binding_to_dict
from markscale.resolve import BindingResolver, resolve_binding
from markscale.scale import BindingState, Scale, ScaleBinding
from markscale.scales import (
    ArithmeticScale,
    DomainRangeScale,
    InterpolateScale,
    LinearScale,
    LogScale,
    add,
    add_scale,
    div,
    div_scale,
    interpolate,
    linear,
    log,
    mul,
    mul_scale,
    sub,
    sub_scale,
    vector2,
    vector2_scale,
)
from markscale.typesys import ValueType

try:
    __version__: str = version("markscale")
except PackageNotFoundError:  # pragma: no cover - editable local fallback
    __version__ = "0.1.0"


def about(*, print_output: bool = True) -> str:
    """Return and optionally print the scale layer contract.

    Args:
        print_output: Whether to print the returned summary.

    Returns:
        Human-readable contract summary string.

    Example:
        >>> from markscale import about
        >>> text = about(print_output=False)
        >>> "Invocation" in text
        True
    """
    text = (
        f"markscale {__version__}\n"
        "Invocation: scale(*values) captures arguments unevaluated and returns a ScaleBinding.\n"
        "Resolution: attributes from get_attributes() are resolved to expressions, then get_expression() builds the node.\n"
        "Custom scales: expression text is parsed once; output type is inferred on every invocation.\n"
        "Evaluation: never performed here; zero-width or non-positive log domains surface downstream."
    )
    if print_output:
        print(text)
    return text


__all__ = [
    "__version__",
    "about",
    "ArithmeticScale",
    "BindingKind",
    "BindingResolver",
    "BindingState",
    "Color",
    "CustomScale",
    "DataRef",
    "DomainRangeScale",
    "ExpressionEmitter",
    "ExpressionSyntaxError",
    "ExpressionTypeError",
    "InterpolateScale",
    "LinearScale",
    "LogScale",
    "Scale",
    "ScaleArityError",
    "ScaleAttributeInfo",
    "ScaleBinding",
    "ScaleBindingError",
    "ScaleConfigurationError",
    "ScaleError",
    "ScaleWarning",
    "ValueType",
    "Vector2",
    "Vector3",
    "Vector4",
    "add",
    "add_scale",
    "custom",
    "div",
    "div_scale",
    "emit_expression",
    "export_binding",
    "expression_to_dict",
    "interpolate",
    "linear",
    "log",
    "mul",
    "mul_scale",
    "resolve_binding",
    "scale_binding_to_dict",
    "sub",
    "sub_scale",
    "vector2",
    "vector2_scale",
]

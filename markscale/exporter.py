import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, List

from markscale.binding import BindingKind, DataRef, ScaleAttributeInfo, binding_kind
from markscale.errors import ExpressionTypeError
from markscale.ir import Binary, Call, Component, Constant, Expr, FieldRef, Unary, Variable
from markscale.scale import ScaleBinding


def expression_to_dict(expr: Expr) -> Dict[str, Any]:
    """Serialize an IR tree into a JSON-ready payload."""
    if isinstance(expr, Constant):
        return {
            "type": "constant",
            "value_type": expr.value_type.value,
            "value": _literal_to_json(expr.value),
        }
    if isinstance(expr, Variable):
        return {"type": "variable", "value_type": expr.value_type.value, "name": expr.name}
    if isinstance(expr, FieldRef):
        return {"type": "field", "value_type": expr.value_type.value, "field": expr.field}
    if isinstance(expr, Unary):
        return {
            "type": "unary",
            "value_type": expr.value_type.value,
            "op": expr.op,
            "operand": expression_to_dict(expr.operand),
        }
    if isinstance(expr, Binary):
        return {
            "type": "binary",
            "value_type": expr.value_type.value,
            "op": expr.op,
            "left": expression_to_dict(expr.left),
            "right": expression_to_dict(expr.right),
        }
    if isinstance(expr, Call):
        return {
            "type": "call",
            "value_type": expr.value_type.value,
            "name": expr.name,
            "args": [expression_to_dict(arg) for arg in expr.args],
        }
    if isinstance(expr, Component):
        return {
            "type": "component",
            "value_type": expr.value_type.value,
            "field": expr.field,
            "value": expression_to_dict(expr.value),
        }
    raise ExpressionTypeError(f"Unsupported expression IR node: {type(expr).__name__}")


def binding_value_to_dict(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"kind": "unbound"}
    kind = binding_kind(value)
    if kind is BindingKind.SCALE:
        return {"kind": kind.value, "binding": scale_binding_to_dict(value)}
    if kind is BindingKind.EXPRESSION:
        return {"kind": kind.value, "expression": expression_to_dict(value)}
    if kind is BindingKind.REFERENCE:
        return {"kind": kind.value, **_data_ref_to_dict(value)}
    return {"kind": kind.value, "value": _literal_to_json(value)}


def attributes_to_dict(attributes: List[ScaleAttributeInfo]) -> List[Dict[str, Any]]:
    return [
        {
            "name": info.name,
            "value_type": info.value_type.value,
            "binding": binding_value_to_dict(info.binding),
        }
        for info in attributes
    ]


def scale_binding_to_dict(binding: ScaleBinding) -> Dict[str, Any]:
    return {
        "scale": type(binding.scale).__name__,
        "state": binding.state.value,
        "value_type": binding.value_type.value,
        "argument_types": [t.value for t in binding.argument_types],
        "arguments": [binding_value_to_dict(arg) for arg in binding.argument_expressions],
        "attributes": attributes_to_dict(binding.scale.get_attributes()),
    }


def export_binding(binding: ScaleBinding, output_path: str) -> Path:
    """Write the serialized binding as indented JSON and return the path."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(scale_binding_to_dict(binding), indent=2), encoding="utf-8")
    return path


def _data_ref_to_dict(ref: DataRef) -> Dict[str, Any]:
    return {
        "field": ref.field,
        "value_type": ref.value_type.value if ref.value_type is not None else None,
    }


def _literal_to_json(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    return value

"""Text rendering for argument expressions.

Two directions live here: ESTree expression dicts are re-generated as
JavaScript-like source (kept opaque as ``RawExpr``), and IR arguments are
rendered as Java expressions for the emitted Dimple code.
"""

from __future__ import annotations

import json
from typing import Any

from tracedimple.errors import SchemaError, UnsupportedNodeError
from tracedimple.ir.nodes import Argument, ArrayLit, Const, RawExpr, Var


def generate_js(node: dict[str, Any]) -> str:
    """Re-generate source text for an ESTree expression dict."""

    node_type = node.get("type")
    if node_type == "Identifier":
        return str(node["name"])
    if node_type == "Literal":
        return _js_literal(node.get("value"), node.get("raw"))
    if node_type == "ArrayExpression":
        return "[" + ", ".join(generate_js(el) for el in node.get("elements") or []) + "]"
    if node_type == "CallExpression":
        args = ", ".join(generate_js(arg) for arg in node.get("arguments") or [])
        return f"{generate_js(node['callee'])}({args})"
    if node_type == "MemberExpression":
        obj = generate_js(node["object"])
        prop = generate_js(node["property"])
        if node.get("computed"):
            return f"{obj}[{prop}]"
        return f"{obj}.{prop}"
    if node_type == "UnaryExpression":
        operator = node["operator"]
        argument = generate_js(node["argument"])
        if operator.isalpha():
            return f"{operator} {argument}"
        return f"{operator}{argument}"
    if node_type in ("BinaryExpression", "LogicalExpression"):
        return f"({generate_js(node['left'])} {node['operator']} {generate_js(node['right'])})"
    raise UnsupportedNodeError(str(node_type))


def _js_literal(value: object, raw: object) -> str:
    if isinstance(raw, str) and raw:
        if raw[0] in "\"'":
            # escodegen re-quotes strings with single quotes
            return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"
        return raw
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
    return repr(value)


def render_java(arg: Argument) -> str:
    """Render an IR argument as a Java expression."""

    if isinstance(arg, Var):
        return arg.name
    if isinstance(arg, Const):
        return java_literal(arg.value)
    if isinstance(arg, ArrayLit):
        elements = [render_java(el) for el in arg.elements]
        return f"new {array_element_type(arg)}[] {{{', '.join(elements)}}}"
    if isinstance(arg, RawExpr):
        return arg.text
    raise SchemaError(f"Unsupported argument type: {type(arg).__name__}")


def java_literal(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        # JSON string escaping is valid Java for the printable range
        return json.dumps(value)
    raise SchemaError(f"Unsupported literal type: {type(value).__name__}")


def array_element_type(arr: ArrayLit) -> str:
    values = [el.value for el in arr.elements if isinstance(el, Const)]
    if len(values) != len(arr.elements) or not values:
        return "Object"
    if all(isinstance(v, bool) for v in values):
        return "boolean"
    if all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return "double"
    if all(isinstance(v, str) for v in values):
        return "String"
    return "Object"


def numeric_value(arg: Argument) -> float | None:
    """Return the number held by a numeric literal argument, else None."""

    if isinstance(arg, Const) and isinstance(arg.value, (int, float)) and not isinstance(arg.value, bool):
        return float(arg.value)
    return None

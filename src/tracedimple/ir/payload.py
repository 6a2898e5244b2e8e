"""ESTree payload decoding for traced programs.

The tracer hands over either JavaScript source in simple form or the ESTree
JSON that esprima produces for it. Both are validated with pydantic models
and converted into IR nodes.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional, Union

import esprima
from esprima.error_handler import Error as EsprimaError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tracedimple.errors import MalformedLiteralAssignmentError, SchemaError, UnsupportedNodeError
from tracedimple.ir.expressions import generate_js
from tracedimple.ir.nodes import (
    EVIDENCE_KINDS,
    Argument,
    ArrayLit,
    Assign,
    Call,
    Const,
    Evidence,
    If,
    Initializer,
    Program,
    Query,
    RawExpr,
    Statement,
    Var,
    evidence_target,
)

logger = logging.getLogger(__name__)

JsonNode = dict[str, Any]


class _EstreeModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str


class ProgramModel(_EstreeModel):
    type: Literal["Program"] = "Program"
    body: list[JsonNode] = Field(default_factory=list)


class VariableDeclarationModel(_EstreeModel):
    type: Literal["VariableDeclaration"] = "VariableDeclaration"
    declarations: list[JsonNode] = Field(min_length=1)


class VariableDeclaratorModel(_EstreeModel):
    type: Literal["VariableDeclarator"] = "VariableDeclarator"
    id: JsonNode
    init: Optional[JsonNode] = None


class ExpressionStatementModel(_EstreeModel):
    type: Literal["ExpressionStatement"] = "ExpressionStatement"
    expression: JsonNode


class IfStatementModel(_EstreeModel):
    type: Literal["IfStatement"] = "IfStatement"
    test: JsonNode
    consequent: JsonNode
    alternate: Optional[JsonNode] = None


class BlockStatementModel(_EstreeModel):
    type: Literal["BlockStatement"] = "BlockStatement"
    body: list[JsonNode] = Field(default_factory=list)


class IdentifierModel(_EstreeModel):
    type: Literal["Identifier"] = "Identifier"
    name: str = Field(min_length=1)


class LiteralModel(_EstreeModel):
    type: Literal["Literal"] = "Literal"
    value: Union[bool, int, float, str, None] = None
    raw: Optional[str] = None


class ArrayExpressionModel(_EstreeModel):
    type: Literal["ArrayExpression"] = "ArrayExpression"
    elements: list[Optional[JsonNode]] = Field(default_factory=list)


class CallExpressionModel(_EstreeModel):
    type: Literal["CallExpression"] = "CallExpression"
    callee: JsonNode
    arguments: list[JsonNode] = Field(default_factory=list)


class UnaryExpressionModel(_EstreeModel):
    type: Literal["UnaryExpression"] = "UnaryExpression"
    operator: str
    argument: JsonNode


def parse_source(source: str) -> Program:
    """Parse simple-form trace source text into an IR program."""

    try:
        tree = esprima.parseScript(source)
    except EsprimaError as exc:
        raise SchemaError(f"Could not parse trace source: {exc}") from exc
    return program_from_estree(tree.toDict())


def program_from_estree(data: JsonNode) -> Program:
    """Convert an ESTree ``Program`` dict into IR."""

    model = _validate(ProgramModel, data)
    body: list[Statement] = []
    for item in model.body:
        statement = _statement(item)
        if statement is not None:
            body.append(statement)
    logger.debug(f"Decoded ESTree program with {len(body)} statements")
    return Program(body=body)


def coerce_program(source: Union[Program, str, JsonNode]) -> Program:
    """Accept a Program, trace source text, or an ESTree dict."""

    if isinstance(source, Program):
        return source
    if isinstance(source, str):
        return parse_source(source)
    if isinstance(source, dict):
        return program_from_estree(source)
    raise SchemaError(f"Cannot translate input of type {type(source).__name__}")


def _validate(model_cls: type[_EstreeModel], data: Any) -> Any:
    if not isinstance(data, dict):
        raise SchemaError(f"ESTree node must be an object, got {type(data).__name__}")
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise SchemaError(f"Malformed {data.get('type', 'ESTree')} node: {exc}") from exc


def _node_type(data: Any) -> str:
    if not isinstance(data, dict):
        raise SchemaError(f"ESTree node must be an object, got {type(data).__name__}")
    return str(data.get("type"))


def _statement(data: JsonNode) -> Statement | None:
    node_type = _node_type(data)
    if node_type == "EmptyStatement":
        return None
    if node_type == "VariableDeclaration":
        return _declaration(data)
    if node_type == "ExpressionStatement":
        return _expression_statement(data)
    if node_type == "IfStatement":
        model = _validate(IfStatementModel, data)
        test_type = _node_type(model.test)
        if test_type != "Identifier":
            raise UnsupportedNodeError(f"IfStatement test {test_type}")
        if model.alternate is None:
            raise SchemaError("IfStatement requires an else branch assigning the merge variable.")
        return If(
            test=Var(_validate(IdentifierModel, model.test).name),
            consequent=_branch(model.consequent),
            alternate=_branch(model.alternate),
        )
    raise UnsupportedNodeError(node_type)


def _declaration(data: JsonNode) -> Assign:
    model = _validate(VariableDeclarationModel, data)
    if len(model.declarations) != 1:
        raise SchemaError(
            f"Expected one declarator per declaration, got {len(model.declarations)}."
        )
    declarator = _validate(VariableDeclaratorModel, model.declarations[0])
    if _node_type(declarator.id) != "Identifier":
        raise UnsupportedNodeError(f"VariableDeclarator id {_node_type(declarator.id)}")
    name = _validate(IdentifierModel, declarator.id).name
    if declarator.init is None:
        raise MalformedLiteralAssignmentError(name, "declaration has no initializer")
    return Assign(name=name, init=_initializer(declarator.init))


def _expression_statement(data: JsonNode) -> Statement:
    expression = _validate(ExpressionStatementModel, data).expression
    expr_type = _node_type(expression)
    if expr_type == "Identifier":
        return Query(_validate(IdentifierModel, expression).name)
    if expr_type == "CallExpression":
        call = _call(expression)
        if call.callee in EVIDENCE_KINDS:
            return Evidence(evidence=call.callee, name=evidence_target(call))  # type: ignore[arg-type]
    raise UnsupportedNodeError(f"ExpressionStatement {expr_type}")


def _branch(data: JsonNode) -> list[Statement]:
    if _node_type(data) == "BlockStatement":
        items = _validate(BlockStatementModel, data).body
    else:
        items = [data]
    statements = [s for s in (_statement(item) for item in items) if s is not None]
    return statements


def _initializer(data: JsonNode) -> Initializer:
    node_type = _node_type(data)
    if node_type == "CallExpression":
        return _call(data)
    if node_type == "Identifier":
        return Var(_validate(IdentifierModel, data).name)
    if node_type == "Literal":
        return Const(_validate(LiteralModel, data).value)
    if node_type == "ArrayExpression":
        return _array(data)
    if node_type == "UnaryExpression":
        negated = _negative_number(data)
        if negated is not None:
            return negated
    raise UnsupportedNodeError(node_type)


def _call(data: JsonNode) -> Call:
    model = _validate(CallExpressionModel, data)
    if _node_type(model.callee) == "Identifier":
        callee = _validate(IdentifierModel, model.callee).name
    else:
        callee = generate_js(model.callee)
    return Call(callee=callee, args=[_argument(arg) for arg in model.arguments])


def _argument(data: JsonNode) -> Argument:
    node_type = _node_type(data)
    if node_type == "Literal":
        return Const(_validate(LiteralModel, data).value)
    if node_type == "Identifier":
        return Var(_validate(IdentifierModel, data).name)
    if node_type == "ArrayExpression":
        return _array(data)
    if node_type == "UnaryExpression":
        negated = _negative_number(data)
        if negated is not None:
            return negated
    return RawExpr(generate_js(data))


def _array(data: JsonNode) -> ArrayLit:
    model = _validate(ArrayExpressionModel, data)
    elements: list[Argument] = []
    for element in model.elements:
        if element is None:
            raise SchemaError("Sparse array literals are not supported.")
        elements.append(_argument(element))
    return ArrayLit(elements=elements)


def _negative_number(data: JsonNode) -> Const | None:
    model = _validate(UnaryExpressionModel, data)
    if model.operator != "-" or _node_type(model.argument) != "Literal":
        return None
    value = _validate(LiteralModel, model.argument).value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return Const(-value)

"""IR node types for traced probabilistic programs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

from tracedimple.errors import SchemaError, UnsupportedNodeError


EvidenceKind = Literal["condition", "factor"]
EVIDENCE_KINDS: tuple[str, ...] = ("condition", "factor")

LiteralValue = Union[str, int, float, bool, None]


class IRNode:
    """Base class for IR nodes."""

    kind: str = "node"

    def to_dict(self) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass(frozen=True)
class Var(IRNode):
    """Reference to a previously declared variable."""

    name: str
    kind = "var"

    def __post_init__(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise SchemaError("Var name must be a non-empty string.")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "var", "name": self.name}


@dataclass(frozen=True)
class Const(IRNode):
    """Literal value."""

    value: LiteralValue
    kind = "const"

    def __post_init__(self) -> None:
        if self.value is not None and not isinstance(self.value, (str, int, float, bool)):
            raise SchemaError(f"Unsupported literal type: {type(self.value).__name__}")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "const", "value": self.value}


@dataclass(frozen=True)
class ArrayLit(IRNode):
    """Literal array whose elements are themselves arguments."""

    elements: list["Argument"] = field(default_factory=list)
    kind = "array"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "array", "elements": [e.to_dict() for e in self.elements]}


@dataclass(frozen=True)
class RawExpr(IRNode):
    """Expression kept as source text, e.g. the tracer's ERP metadata argument."""

    text: str
    kind = "raw"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "raw", "text": self.text}


Argument = Union[Var, Const, ArrayLit, RawExpr]


@dataclass(frozen=True)
class Call(IRNode):
    """Primitive call ``callee(args...)``."""

    callee: str
    args: list[Argument] = field(default_factory=list)
    kind = "call"

    def __post_init__(self) -> None:
        if not self.callee:
            raise SchemaError("Call callee must be non-empty.")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "call", "callee": self.callee, "args": [a.to_dict() for a in self.args]}


Initializer = Union[Call, Var, Const, ArrayLit]


@dataclass(frozen=True)
class Assign(IRNode):
    """Single-declarator assignment ``var name = init``."""

    name: str
    init: Initializer
    kind = "assign"

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Assign name must be non-empty.")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "assign", "name": self.name, "init": self.init.to_dict()}


@dataclass(frozen=True)
class Evidence(IRNode):
    """``condition(name)`` or ``factor(name)``."""

    evidence: EvidenceKind
    name: str
    kind = "evidence"

    def __post_init__(self) -> None:
        if self.evidence not in EVIDENCE_KINDS:
            raise SchemaError(f"Evidence kind must be one of {list(EVIDENCE_KINDS)}: {self.evidence}")
        if not self.name:
            raise SchemaError("Evidence variable name must be non-empty.")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "evidence", "evidence": self.evidence, "name": self.name}


@dataclass(frozen=True)
class If(IRNode):
    """Conditional whose branches both end by assigning the same merge variable."""

    test: Var
    consequent: list["Statement"]
    alternate: list["Statement"]
    kind = "if"

    def __post_init__(self) -> None:
        if not self.consequent or not self.alternate:
            raise SchemaError("If branches must each contain at least one statement.")
        then_last = self.consequent[-1]
        else_last = self.alternate[-1]
        if not isinstance(then_last, Assign) or not isinstance(else_last, Assign):
            raise SchemaError("If branches must end with an assignment to the merge variable.")
        if then_last.name != else_last.name:
            raise SchemaError(
                f"If branches assign different merge variables: "
                f"{then_last.name} vs {else_last.name}."
            )

    @property
    def merge_name(self) -> str:
        return self.consequent[-1].name  # type: ignore[union-attr]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "if",
            "test": self.test.to_dict(),
            "consequent": [s.to_dict() for s in self.consequent],
            "alternate": [s.to_dict() for s in self.alternate],
        }


@dataclass(frozen=True)
class Query(IRNode):
    """Trailing bare identifier whose belief is requested."""

    name: str
    kind = "query"

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Query name must be non-empty.")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "query", "name": self.name}


Statement = Union[Assign, Evidence, If, Query]


@dataclass(frozen=True)
class Program(IRNode):
    """Ordered top-level statements."""

    body: list[Statement] = field(default_factory=list)
    kind = "program"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "program", "body": [s.to_dict() for s in self.body]}


def node_from_dict(data: dict[str, Any]) -> IRNode:
    """Deserialize a node produced by ``to_dict``."""

    kind = data.get("kind")
    if kind == "var":
        return Var(name=data["name"])
    if kind == "const":
        return Const(value=data.get("value"))
    if kind == "array":
        return ArrayLit(elements=[_argument_from_dict(e) for e in data.get("elements", [])])
    if kind == "raw":
        return RawExpr(text=str(data["text"]))
    if kind == "call":
        return Call(
            callee=data["callee"],
            args=[_argument_from_dict(a) for a in data.get("args", [])],
        )
    if kind == "assign":
        init = node_from_dict(data["init"])
        if not isinstance(init, (Call, Var, Const, ArrayLit)):
            raise SchemaError(f"Unsupported assignment initializer: {init.kind}")
        return Assign(name=data["name"], init=init)
    if kind == "evidence":
        return Evidence(evidence=data["evidence"], name=data["name"])
    if kind == "if":
        test = node_from_dict(data["test"])
        if not isinstance(test, Var):
            raise SchemaError("If test must be a variable reference.")
        return If(
            test=test,
            consequent=[_statement_from_dict(s) for s in data.get("consequent", [])],
            alternate=[_statement_from_dict(s) for s in data.get("alternate", [])],
        )
    if kind == "query":
        return Query(name=data["name"])
    if kind == "program":
        return Program(body=[_statement_from_dict(s) for s in data.get("body", [])])
    raise UnsupportedNodeError(str(kind))


def _argument_from_dict(data: dict[str, Any]) -> Argument:
    node = node_from_dict(data)
    if not isinstance(node, (Var, Const, ArrayLit, RawExpr)):
        raise SchemaError(f"Call arguments must be var/const/array/raw, got {node.kind}.")
    return node


def _statement_from_dict(data: dict[str, Any]) -> Statement:
    node = node_from_dict(data)
    if not isinstance(node, (Assign, Evidence, If, Query)):
        raise SchemaError(f"Expected a statement node, got {node.kind}.")
    return node


def evidence_target(call: Call) -> str:
    """Name of the variable an evidence call refers to."""

    if len(call.args) != 1 or not isinstance(call.args[0], Var):
        raise SchemaError(f"{call.callee}() expects a single variable argument.")
    return call.args[0].name

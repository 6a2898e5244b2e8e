"""IR nodes and decoding for traced programs."""

from tracedimple.ir.nodes import (
    ArrayLit,
    Assign,
    Call,
    Const,
    Evidence,
    If,
    IRNode,
    Program,
    Query,
    RawExpr,
    Var,
    node_from_dict,
)
from tracedimple.ir.payload import coerce_program, parse_source, program_from_estree

__all__ = [
    "ArrayLit",
    "Assign",
    "Call",
    "Const",
    "Evidence",
    "If",
    "IRNode",
    "Program",
    "Query",
    "RawExpr",
    "Var",
    "node_from_dict",
    "coerce_program",
    "parse_source",
    "program_from_estree",
]

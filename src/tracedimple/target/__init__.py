"""Target-language statement model and emitter."""

from tracedimple.target.emitter import CodeEmitter, JavaFormatter, render_source_file
from tracedimple.target.statements import (
    AddFactor,
    DeclareLocal,
    DeclareVariable,
    ExtractBelief,
    PrintBelief,
    SetFixedValue,
    SetNumIterations,
    Solve,
    TargetStatement,
)

__all__ = [
    "CodeEmitter",
    "JavaFormatter",
    "render_source_file",
    "AddFactor",
    "DeclareLocal",
    "DeclareVariable",
    "ExtractBelief",
    "PrintBelief",
    "SetFixedValue",
    "SetNumIterations",
    "Solve",
    "TargetStatement",
]

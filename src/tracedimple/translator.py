"""Translate traced IR programs into Dimple factor-graph construction code."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Optional, Union

from tracedimple.config import TranslatorConfig
from tracedimple.errors import MalformedLiteralAssignmentError, SchemaError, UnsupportedNodeError
from tracedimple.factors.builder import FactorBuilder
from tracedimple.factors.evidence import EvidenceBuilder
from tracedimple.factors.registry import PrimitiveRegistry, default_registry
from tracedimple.ir.expressions import array_element_type, java_literal, render_java
from tracedimple.ir.nodes import (
    EVIDENCE_KINDS,
    ArrayLit,
    Assign,
    Call,
    Const,
    Evidence,
    If,
    IRNode,
    Program,
    Query,
    Statement,
    Var,
    evidence_target,
)
from tracedimple.ir.payload import coerce_program
from tracedimple.target.emitter import CodeEmitter, JavaFormatter
from tracedimple.target.statements import (
    AddFactor,
    DeclareLocal,
    DeclareVariable,
    ExtractBelief,
    PrintBelief,
    SetNumIterations,
    Solve,
    TargetStatement,
)

logger = logging.getLogger(__name__)

Source = Union[Program, str, dict[str, Any]]


@dataclass
class _TranslationState:
    emitter: CodeEmitter = field(default_factory=CodeEmitter)
    # Dimple variable types by name
    types: dict[str, str] = field(default_factory=dict)
    # every name the program assigns, anywhere
    assigned: set[str] = field(default_factory=set)


class Translator:
    """Single-pass, depth-first translation of one traced program.

    The registry is the only state shared between calls; everything else
    lives in a per-call ``_TranslationState`` so a failed translation
    leaves nothing behind.
    """

    def __init__(
        self,
        registry: PrimitiveRegistry | None = None,
        config: TranslatorConfig | None = None,
    ) -> None:
        self.config = config or TranslatorConfig()
        self.registry = registry if registry is not None else default_registry()
        self.factors = FactorBuilder(self.registry, self.config)
        self.evidence = EvidenceBuilder(self.config)
        self.formatter = JavaFormatter(graph_name=self.config.graph_name)

    def translate(self, source: Source) -> str:
        emitter = CodeEmitter()
        emitter.emit(*self.translate_statements(source))
        return emitter.render(self.formatter)

    def translate_statements(self, source: Source) -> list[TargetStatement]:
        program = coerce_program(source)
        state = _TranslationState()
        self._visit(program, state)
        logger.info(
            f"Translated {len(program.body)} statements into {len(state.emitter)} Dimple statements"
        )
        return state.emitter.statements

    def _visit(self, node: IRNode, state: _TranslationState) -> Optional[str]:
        if isinstance(node, Var):
            return node.name
        if isinstance(node, Program):
            self._visit_program(node, state)
            return None
        if isinstance(node, Assign):
            self._visit_assign(node.name, node.init, state)
            return None
        if isinstance(node, Evidence):
            state.emitter.emit(
                *self.evidence.build(node.evidence, node.name, state.types.get(node.name))
            )
            return None
        if isinstance(node, If):
            self._visit_if(node, state)
            return None
        if isinstance(node, Query):
            self._visit_query(node, state)
            return None
        raise UnsupportedNodeError(type(node).__name__)

    def _visit_program(self, program: Program, state: _TranslationState) -> None:
        state.assigned.update(_assigned_names(program.body))
        last = len(program.body) - 1
        for idx, statement in enumerate(program.body):
            if isinstance(statement, Query) and idx != last:
                raise SchemaError(
                    f"Query on {statement.name} must be the final statement of the program."
                )
            self._visit(statement, state)

    def _visit_assign(self, name: str, init: IRNode, state: _TranslationState) -> None:
        if isinstance(init, Call):
            if init.callee in EVIDENCE_KINDS:
                target = evidence_target(init)
                state.emitter.emit(
                    *self.evidence.build(init.callee, target, state.types.get(target))
                )
                return
            statements = self.factors.build(name, init.callee, init.args)
            state.types[name] = statements[0].var_type  # type: ignore[attr-defined]
            state.emitter.emit(*statements)
            return
        if isinstance(init, Var):
            var_type = state.types.get(init.name)
            if var_type is None:
                logger.warning(f"Alias {name} = {init.name} of unknown type; declaring Bit")
                var_type = "Bit"
            state.types[name] = var_type
            state.emitter.emit(
                DeclareVariable(var_type=var_type, name=name),
                AddFactor(constructor=self.config.alias_factor, output=name, inputs=[init.name]),
            )
            return
        if isinstance(init, Const):
            state.emitter.emit(
                DeclareLocal(java_type=_java_type(name, init.value), name=name, value=java_literal(init.value))
            )
            return
        if isinstance(init, ArrayLit):
            if not init.elements:
                raise MalformedLiteralAssignmentError(name, "empty array has no element type")
            state.emitter.emit(
                DeclareLocal(java_type=f"{array_element_type(init)}[]", name=name, value=render_java(init))
            )
            return
        raise UnsupportedNodeError(type(init).__name__)

    def _visit_if(self, node: If, state: _TranslationState) -> None:
        merge = node.merge_name
        selector = self._visit(node.test, state)
        consequent, then_type = self._visit_branch(node.consequent, merge, "then", state)
        alternate, else_type = self._visit_branch(node.alternate, merge, "else", state)
        merge_type = then_type or else_type
        if merge_type is None:
            logger.warning(f"Cannot infer type of merge variable {merge}; declaring Bit")
            merge_type = "Bit"
        state.types[merge] = merge_type
        state.emitter.emit(
            DeclareVariable(var_type=merge_type, name=merge),
            AddFactor(
                constructor=self.config.multiplexer_factor,
                output=merge,
                # Dimple selects inputs by zero-based index, so false (0) picks the else value
                inputs=[str(selector), alternate, consequent],
            ),
        )

    def _visit_branch(
        self,
        statements: list[Statement],
        merge: str,
        suffix: str,
        state: _TranslationState,
    ) -> tuple[str, Optional[str]]:
        """Translate a branch; return its value expression and Dimple type."""

        for statement in statements[:-1]:
            if isinstance(statement, Query):
                raise SchemaError(f"Query on {statement.name} is not allowed inside a branch.")
            if _is_evidence(statement):
                # hoisted statements apply on every path
                raise SchemaError(f"Evidence inside the {suffix} branch of {merge} cannot be made conditional.")
            self._visit(statement, state)
        last = statements[-1]
        if not isinstance(last, Assign):  # pragma: no cover - enforced by If
            raise SchemaError("Branch must end with an assignment to the merge variable.")
        init = last.init
        if isinstance(init, Var):
            return init.name, state.types.get(init.name)
        if isinstance(init, Const):
            if isinstance(init.value, bool):
                return ("1" if init.value else "0"), "Bit"
            return java_literal(init.value), _literal_dimple_type(init.value)
        if isinstance(init, Call):
            if init.callee in EVIDENCE_KINDS:
                raise SchemaError(f"Merge variable {merge} cannot be assigned from {init.callee}().")
            local = f"{merge}_{suffix}"
            if local in state.types or local in state.assigned:
                raise SchemaError(f"Branch value {local} collides with an existing variable.")
            self._visit_assign(local, init, state)
            return local, state.types.get(local)
        raise UnsupportedNodeError(f"branch value {type(init).__name__}")

    def _visit_query(self, node: Query, state: _TranslationState) -> None:
        belief = self.config.belief_name
        state.emitter.emit(
            SetNumIterations(count=self.config.num_iterations),
            Solve(),
            ExtractBelief(belief_name=belief, variable=node.name),
            PrintBelief(belief_name=belief),
        )


def translate(
    source: Source,
    *,
    registry: PrimitiveRegistry | None = None,
    config: TranslatorConfig | None = None,
) -> str:
    """Translate ``source`` with a fresh ``Translator``."""

    return Translator(registry=registry, config=config).translate(source)


def _java_type(name: str, value: object) -> str:
    if value is None:
        raise MalformedLiteralAssignmentError(name, "null has no Java type")
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return "String"
    raise MalformedLiteralAssignmentError(name, f"unsupported literal {value!r}")


def _literal_dimple_type(value: object) -> Optional[str]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return "Real"
    return None


def _is_evidence(statement: Statement) -> bool:
    if isinstance(statement, Evidence):
        return True
    return (
        isinstance(statement, Assign)
        and isinstance(statement.init, Call)
        and statement.init.callee in EVIDENCE_KINDS
    )


def _assigned_names(statements: list[Statement]) -> set[str]:
    names: set[str] = set()
    for statement in statements:
        if isinstance(statement, Assign):
            names.add(statement.name)
        elif isinstance(statement, If):
            names |= _assigned_names(statement.consequent)
            names |= _assigned_names(statement.alternate)
    return names

"""Factor descriptor construction for primitive-call assignments."""

from __future__ import annotations

import logging

from tracedimple.config import TranslatorConfig
from tracedimple.errors import SchemaError
from tracedimple.factors.descriptor import FactorDescriptor
from tracedimple.factors.registry import PrimitiveRegistry
from tracedimple.ir.expressions import render_java
from tracedimple.ir.nodes import Argument, ArrayLit, Const
from tracedimple.target.statements import AddFactor, DeclareVariable, TargetStatement

logger = logging.getLogger(__name__)


class FactorBuilder:
    """Turn ``var out = fn(args)`` into a declaration and an addFactor call."""

    def __init__(self, registry: PrimitiveRegistry, config: TranslatorConfig | None = None) -> None:
        self.registry = registry
        self.config = config or TranslatorConfig()

    def build(
        self,
        output_variable: str,
        primitive: str,
        args: list[Argument],
    ) -> list[TargetStatement]:
        desc = self.describe(output_variable, primitive, args)
        return [
            DeclareVariable(
                var_type=str(desc.target_type),
                name=desc.output_variable,
                args=list(desc.variable_args or []),
            ),
            AddFactor(
                constructor=str(desc.constructor_name),
                output=desc.output_variable,
                constructor_args=list(desc.constructor_args or []),
                inputs=list(desc.input_variables or []),
            ),
        ]

    def describe(
        self,
        output_variable: str,
        primitive: str,
        args: list[Argument],
    ) -> FactorDescriptor:
        primitive, args = self.unwrap(primitive, args)
        desc = FactorDescriptor(
            output_variable=output_variable,
            primitive=primitive,
            args=list(args),
            rendered_args=[render_java(arg) for arg in args],
        )
        self.registry.describe(desc)
        logger.debug(
            f"{output_variable} = {primitive}: {desc.target_type} via {desc.constructor_name}"
        )
        return desc

    def unwrap(self, primitive: str, args: list[Argument]) -> tuple[str, list[Argument]]:
        """Strip the ERP dispatcher: ``random('erp', [a, ..., meta])`` -> ``erp(a, ...)``."""

        if primitive != self.config.dispatcher_name:
            return primitive, list(args)
        if len(args) < 2:
            raise SchemaError(
                f"{primitive}() expects an ERP name and an argument list, got {len(args)} argument(s)."
            )
        name, erp_args = args[0], args[1]
        if not isinstance(name, Const) or not isinstance(name.value, str) or not name.value:
            raise SchemaError(f"{primitive}() first argument must be the ERP name string.")
        if not isinstance(erp_args, ArrayLit):
            raise SchemaError(f"{primitive}() second argument must be an array literal.")
        elements = list(erp_args.elements)
        if elements:
            elements.pop()
        return name.value, elements

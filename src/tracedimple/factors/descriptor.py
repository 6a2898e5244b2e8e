"""Factor descriptor filled in by primitive producers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from tracedimple.errors import RegistryError
from tracedimple.ir.nodes import Argument


TargetType = Literal["Discrete", "Bit", "Real", "RealJoint", "FiniteFieldVariable"]
TARGET_TYPES: tuple[str, ...] = ("Discrete", "Bit", "Real", "RealJoint", "FiniteFieldVariable")


@dataclass
class FactorDescriptor:
    """Everything needed to declare one Dimple variable and attach its factor.

    Producers receive the descriptor with ``output_variable``, ``primitive``,
    ``args`` and ``rendered_args`` set, and populate the rest in place.

    Attributes:
        output_variable: Name of the variable being declared.
        primitive: Primitive name after dispatcher unwrapping.
        args: Call arguments as IR nodes.
        rendered_args: ``args`` rendered as Java expressions, same order.
        target_type: Dimple variable class.
        constructor_name: Dimple factor function class.
        constructor_args: Java expressions passed to the factor constructor.
        input_variables: Factor edges after the output variable.
        variable_args: Java expressions passed to the variable constructor,
            e.g. a ``Discrete`` domain.
    """

    output_variable: str
    primitive: str
    args: list[Argument] = field(default_factory=list)
    rendered_args: list[str] = field(default_factory=list)
    target_type: Optional[TargetType] = None
    constructor_name: Optional[str] = None
    constructor_args: Optional[list[str]] = None
    input_variables: Optional[list[str]] = None
    variable_args: Optional[list[str]] = None

    def finalize(self) -> None:
        """Apply defaults and check that the producer did its job."""

        if self.target_type is None:
            raise RegistryError(f"Producer for {self.primitive} did not set target_type.")
        if self.target_type not in TARGET_TYPES:
            raise RegistryError(
                f"Producer for {self.primitive} set unknown target_type: {self.target_type}. "
                f"Expected one of {list(TARGET_TYPES)}."
            )
        if not self.constructor_name:
            raise RegistryError(f"Producer for {self.primitive} did not set constructor_name.")
        if self.constructor_args is None:
            self.constructor_args = []
        if self.input_variables is None:
            self.input_variables = []
        if self.variable_args is None:
            self.variable_args = []

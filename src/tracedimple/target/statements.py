"""Structured Java statements emitted for a Dimple factor graph."""

from __future__ import annotations

from dataclasses import dataclass, field


class TargetStatement:
    """Base class for emitted statements."""

    def variables(self) -> list[str]:
        """Graph variables the statement refers to, declared ones included."""
        return []


@dataclass(frozen=True)
class DeclareVariable(TargetStatement):
    """``Bit ab0 = new Bit();``"""

    var_type: str
    name: str
    args: list[str] = field(default_factory=list)

    def variables(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class AddFactor(TargetStatement):
    """``myGraph.addFactor(new And(), ab2, ab0, ab1);``"""

    constructor: str
    output: str
    constructor_args: list[str] = field(default_factory=list)
    inputs: list[str] = field(default_factory=list)

    def variables(self) -> list[str]:
        return [self.output, *self.inputs]


@dataclass(frozen=True)
class SetFixedValue(TargetStatement):
    name: str
    value: str

    def variables(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class DeclareLocal(TargetStatement):
    """Plain Java local for a literal-initialized declaration."""

    java_type: str
    name: str
    value: str


@dataclass(frozen=True)
class SetNumIterations(TargetStatement):
    count: int


@dataclass(frozen=True)
class Solve(TargetStatement):
    pass


@dataclass(frozen=True)
class ExtractBelief(TargetStatement):
    belief_name: str
    variable: str

    def variables(self) -> list[str]:
        return [self.variable]


@dataclass(frozen=True)
class PrintBelief(TargetStatement):
    belief_name: str

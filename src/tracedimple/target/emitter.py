"""Java formatting and ordered accumulation of emitted statements."""

from __future__ import annotations

from tracedimple.errors import SchemaError
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


DIMPLE_IMPORTS = (
    "java.util.Arrays",
    "com.analog.lyric.dimple.model.core.FactorGraph",
    "com.analog.lyric.dimple.model.variables.*",
    "com.analog.lyric.dimple.factorfunctions.*",
)


class JavaFormatter:
    """Render target statements as single Java lines."""

    def __init__(self, graph_name: str = "myGraph") -> None:
        self.graph_name = graph_name

    def format(self, statement: TargetStatement) -> str:
        if isinstance(statement, DeclareVariable):
            args = ", ".join(statement.args)
            return f"{statement.var_type} {statement.name} = new {statement.var_type}({args});"
        if isinstance(statement, AddFactor):
            ctor_args = ", ".join(statement.constructor_args)
            edges = ", ".join([statement.output, *statement.inputs])
            return f"{self.graph_name}.addFactor(new {statement.constructor}({ctor_args}), {edges});"
        if isinstance(statement, SetFixedValue):
            return f"{statement.name}.setFixedValue({statement.value});"
        if isinstance(statement, DeclareLocal):
            return f"{statement.java_type} {statement.name} = {statement.value};"
        if isinstance(statement, SetNumIterations):
            return f"{self.graph_name}.getSolver().setNumIterations({statement.count});"
        if isinstance(statement, Solve):
            return f"{self.graph_name}.solve();"
        if isinstance(statement, ExtractBelief):
            return f"double[] {statement.belief_name} = {statement.variable}.getBelief();"
        if isinstance(statement, PrintBelief):
            return f"System.out.println(Arrays.toString({statement.belief_name}));"
        raise SchemaError(f"Unsupported target statement: {type(statement).__name__}")


class CodeEmitter:
    """Ordered sink for target statements."""

    def __init__(self) -> None:
        self._statements: list[TargetStatement] = []

    def emit(self, *statements: TargetStatement) -> None:
        self._statements.extend(statements)

    @property
    def statements(self) -> list[TargetStatement]:
        return list(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def render(self, formatter: JavaFormatter) -> str:
        return "\n".join(formatter.format(statement) for statement in self._statements)


def render_source_file(
    code: str,
    *,
    class_name: str = "DimpleModel",
    graph_name: str = "myGraph",
) -> str:
    """Wrap translated statements in a runnable Java class."""

    if not class_name.isidentifier():
        raise SchemaError(f"Invalid Java class name: {class_name}")
    lines = [f"import {name};" for name in DIMPLE_IMPORTS]
    lines.append("")
    lines.append(f"public class {class_name} {{")
    lines.append("    public static void main(String[] args) {")
    lines.append(f"        FactorGraph {graph_name} = new FactorGraph();")
    for line in code.splitlines():
        lines.append(f"        {line}" if line else "")
    lines.append("    }")
    lines.append("}")
    return "\n".join(lines) + "\n"

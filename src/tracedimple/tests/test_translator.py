import unittest

from tracedimple.config import TranslatorConfig
from tracedimple.errors import (
    MalformedLiteralAssignmentError,
    SchemaError,
    UnknownPrimitiveError,
    UnsupportedNodeError,
)
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
)
from tracedimple.target.statements import DeclareVariable
from tracedimple.translator import Translator, translate

META = RawExpr("JSON.parse('null')")


def _erp(name: str, erp: str, *args) -> Assign:
    return Assign(name, Call("random", [Const(erp), ArrayLit([*args, META])]))


def _coin_program() -> Program:
    return Program(
        body=[
            _erp("ab0", "wrapped_flip", Const(0.5)),
            _erp("ab1", "wrapped_flip", Const(0.3)),
            Assign("ab2", Call("and", [Var("ab0"), Var("ab1")])),
            Evidence("condition", "ab2"),
            If(
                test=Var("ab0"),
                consequent=[Assign("ab3", Var("ab1"))],
                alternate=[Assign("ab3", Var("ab2"))],
            ),
            Query("ab3"),
        ]
    )


class _Bogus(IRNode):
    kind = "bogus"


class TestTranslator(unittest.TestCase):
    def test_full_program(self) -> None:
        self.assertEqual(
            translate(_coin_program()).splitlines(),
            [
                "Bit ab0 = new Bit();",
                "myGraph.addFactor(new Bernoulli(0.5), ab0);",
                "Bit ab1 = new Bit();",
                "myGraph.addFactor(new Bernoulli(0.3), ab1);",
                "Bit ab2 = new Bit();",
                "myGraph.addFactor(new And(), ab2, ab0, ab1);",
                "ab2.setFixedValue(1);",
                "Bit ab3 = new Bit();",
                "myGraph.addFactor(new Multiplexer(), ab3, ab0, ab2, ab1);",
                "myGraph.getSolver().setNumIterations(10000);",
                "myGraph.solve();",
                "double[] belief = ab3.getBelief();",
                "System.out.println(Arrays.toString(belief));",
            ],
        )

    def test_boolean_erp_with_hard_evidence(self) -> None:
        program = Program(body=[_erp("ab0", "wrapped_flip", Const(0.5)), Evidence("condition", "ab0")])
        self.assertEqual(
            translate(program).splitlines(),
            [
                "Bit ab0 = new Bit();",
                "myGraph.addFactor(new Bernoulli(0.5), ab0);",
                "ab0.setFixedValue(1);",
            ],
        )

    def test_multiplexer_outputs_merge_variable(self) -> None:
        # The multiplexer writes to the branch merge variable, never a fixed placeholder name.
        text = translate(_coin_program())
        self.assertNotIn("[out1]", text)
        muxes = [line for line in text.splitlines() if "Multiplexer" in line]
        self.assertEqual(muxes, ["myGraph.addFactor(new Multiplexer(), ab3, ab0, ab2, ab1);"])

    def test_true_selector_picks_consequent(self) -> None:
        # Dimple's Multiplexer reads Inputs[selector], so index 1 (true) must hold the then value.
        program = Program(
            body=[
                _erp("ab0", "wrapped_flip", Const(0.5)),
                If(
                    test=Var("ab0"),
                    consequent=[Assign("ab1", Const(True))],
                    alternate=[Assign("ab1", Const(False))],
                ),
            ]
        )
        statements = Translator().translate_statements(program)
        mux = statements[-1]
        self.assertEqual(mux.constructor, "Multiplexer")  # type: ignore[attr-defined]
        selector, when_false, when_true = mux.inputs  # type: ignore[attr-defined]
        self.assertEqual((selector, when_false, when_true), ("ab0", "0", "1"))

    def test_evidence_inside_branch_rejected(self) -> None:
        for evidence in (Evidence("condition", "ab1"), Assign("ab2", Call("factor", [Var("ab1")]))):
            program = Program(
                body=[
                    _erp("ab0", "wrapped_flip", Const(0.5)),
                    _erp("ab1", "wrapped_flip", Const(0.3)),
                    If(
                        test=Var("ab0"),
                        consequent=[evidence, Assign("ab3", Var("ab1"))],
                        alternate=[Assign("ab3", Var("ab0"))],
                    ),
                ]
            )
            with self.subTest(evidence=evidence):
                with self.assertRaises(SchemaError):
                    translate(program)

    def test_branch_local_name_collision(self) -> None:
        for position in ("before", "after"):
            user = Assign("ab4_then", Call("not", [Var("ab0")]))
            branch = If(
                test=Var("ab0"),
                consequent=[Assign("ab4", Call("not", [Var("ab0")]))],
                alternate=[Assign("ab4", Var("ab0"))],
            )
            body = [_erp("ab0", "wrapped_flip", Const(0.5))]
            body += [user, branch] if position == "before" else [branch, user]
            with self.subTest(position=position):
                with self.assertRaises(SchemaError):
                    translate(Program(body=body))

    def test_branch_with_call_uses_branch_local(self) -> None:
        program = Program(
            body=[
                _erp("ab0", "wrapped_flip", Const(0.5)),
                _erp("ab1", "wrapped_flip", Const(0.3)),
                If(
                    test=Var("ab0"),
                    consequent=[
                        Assign("ab2", Call("not", [Var("ab1")])),
                        Assign("ab4", Call("or", [Var("ab2"), Var("ab1")])),
                    ],
                    alternate=[Assign("ab4", Const(False))],
                ),
            ]
        )
        self.assertEqual(
            translate(program).splitlines()[4:],
            [
                "Bit ab2 = new Bit();",
                "myGraph.addFactor(new Not(), ab2, ab1);",
                "Bit ab4_then = new Bit();",
                "myGraph.addFactor(new Or(), ab4_then, ab2, ab1);",
                "Bit ab4 = new Bit();",
                "myGraph.addFactor(new Multiplexer(), ab4, ab0, 0, ab4_then);",
            ],
        )

    def test_merge_type_follows_branch_values(self) -> None:
        program = Program(
            body=[
                _erp("ab0", "wrapped_flip", Const(0.5)),
                _erp("ab1", "wrapped_gaussian", Const(0), Const(1)),
                If(
                    test=Var("ab0"),
                    consequent=[Assign("ab2", Var("ab1"))],
                    alternate=[Assign("ab2", Const(3.5))],
                ),
            ]
        )
        lines = translate(program).splitlines()
        self.assertIn("Real ab2 = new Real();", lines)
        self.assertIn("myGraph.addFactor(new Multiplexer(), ab2, ab0, 3.5, ab1);", lines)

    def test_declaration_before_use(self) -> None:
        declared: set[str] = set()
        for statement in Translator().translate_statements(_coin_program()):
            if isinstance(statement, DeclareVariable):
                declared.add(statement.name)
                continue
            for name in statement.variables():
                self.assertIn(name, declared, f"{name} used before declaration")

    def test_translation_is_deterministic(self) -> None:
        translator = Translator()
        self.assertEqual(translator.translate(_coin_program()), translator.translate(_coin_program()))

    def test_unknown_primitive_aborts(self) -> None:
        program = Program(
            body=[
                _erp("ab0", "wrapped_flip", Const(0.5)),
                Assign("ab1", Call("teleport", [Var("ab0")])),
                Query("ab1"),
            ]
        )
        with self.assertRaises(UnknownPrimitiveError) as ctx:
            translate(program)
        self.assertEqual(ctx.exception.name, "teleport")

    def test_unsupported_node_names_kind(self) -> None:
        with self.assertRaises(UnsupportedNodeError) as ctx:
            translate(Program(body=[_Bogus()]))  # type: ignore[list-item]
        self.assertEqual(ctx.exception.kind, "_Bogus")

    def test_query_must_be_last(self) -> None:
        program = Program(body=[_erp("ab0", "wrapped_flip", Const(0.5)), Query("ab0"), Query("ab0")])
        with self.assertRaises(SchemaError):
            translate(program)

    def test_factor_evidence(self) -> None:
        program = Program(
            body=[
                _erp("ab0", "wrapped_flip", Const(0.5)),
                Evidence("factor", "ab0"),
                Assign("ab1", Call("factor", [Var("ab0")])),
            ]
        )
        lines = translate(program).splitlines()
        self.assertEqual(lines[2:], ["myGraph.addFactor(new Identity(), ab0);"] * 2)

    def test_evidence_assignment_requires_variable(self) -> None:
        program = Program(body=[Assign("ab1", Call("condition", [Const(True)]))])
        with self.assertRaises(SchemaError):
            translate(program)

    def test_literal_assignments(self) -> None:
        program = Program(
            body=[
                Assign("p", Const(0.5)),
                Assign("n", Const(3)),
                Assign("flag", Const(True)),
                Assign("label", Const("heads")),
                Assign("weights", ArrayLit([Const(0.1), Const(0.9)])),
                Assign("counts", ArrayLit([Const(1), Const(3)])),
            ]
        )
        self.assertEqual(
            translate(program).splitlines(),
            [
                "double p = 0.5;",
                "int n = 3;",
                "boolean flag = true;",
                'String label = "heads";',
                "double[] weights = new double[] {0.1, 0.9};",
                "double[] counts = new double[] {1, 3};",
            ],
        )

    def test_null_literal_assignment_fails(self) -> None:
        with self.assertRaises(MalformedLiteralAssignmentError):
            translate(Program(body=[Assign("x", Const(None))]))
        with self.assertRaises(MalformedLiteralAssignmentError):
            translate(Program(body=[Assign("x", ArrayLit([]))]))

    def test_alias_keeps_type(self) -> None:
        program = Program(
            body=[
                _erp("ab0", "wrapped_beta", Const(1), Const(1)),
                Assign("ab1", Var("ab0")),
            ]
        )
        self.assertEqual(
            translate(program).splitlines()[2:],
            ["Real ab1 = new Real();", "myGraph.addFactor(new Equality(), ab1, ab0);"],
        )

    def test_config_changes_preamble(self) -> None:
        config = TranslatorConfig(graph_name="fg", num_iterations=50, belief_name="marginal")
        program = Program(body=[_erp("ab0", "wrapped_flip", Const(0.5)), Query("ab0")])
        self.assertEqual(
            Translator(config=config).translate(program).splitlines()[2:],
            [
                "fg.getSolver().setNumIterations(50);",
                "fg.solve();",
                "double[] marginal = ab0.getBelief();",
                "System.out.println(Arrays.toString(marginal));",
            ],
        )


if __name__ == "__main__":
    unittest.main()

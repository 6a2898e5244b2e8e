import unittest

from tracedimple.errors import MalformedLiteralAssignmentError, SchemaError, UnsupportedNodeError
from tracedimple.ir.nodes import ArrayLit, Assign, Call, Const, Evidence, If, Program, Query, RawExpr, Var, node_from_dict
from tracedimple.ir.payload import coerce_program, parse_source, program_from_estree
from tracedimple.translator import translate


COIN_TRACE = """
var ab0 = random('wrapped_flip',[0.5, JSON.parse('null')]);
var ab1 = random('wrapped_flip',[0.3, JSON.parse('null')]);
var ab2 = and(ab0, ab1);
condition(ab0);
if(ab0){ var ab3 = ab1; } else { var ab3 = ab2; }
ab3
"""


class TestParseSource(unittest.TestCase):
    def test_erp_dispatcher_call(self) -> None:
        program = parse_source("var ab0 = random('wrapped_flip',[0.5, JSON.parse('null')]); condition(ab0);")
        self.assertEqual(
            program.body,
            [
                Assign(
                    "ab0",
                    Call(
                        "random",
                        [Const("wrapped_flip"), ArrayLit([Const(0.5), RawExpr("JSON.parse('null')")])],
                    ),
                ),
                Evidence("condition", "ab0"),
            ],
        )

    def test_conditional_and_trailing_query(self) -> None:
        program = parse_source(COIN_TRACE)
        self.assertEqual(
            program.body[4],
            If(
                test=Var("ab0"),
                consequent=[Assign("ab3", Var("ab1"))],
                alternate=[Assign("ab3", Var("ab2"))],
            ),
        )
        self.assertEqual(program.body[-1], Query("ab3"))

    def test_translate_source_text(self) -> None:
        lines = translate(COIN_TRACE).splitlines()
        self.assertEqual(lines[:2], ["Bit ab0 = new Bit();", "myGraph.addFactor(new Bernoulli(0.5), ab0);"])
        self.assertIn("myGraph.addFactor(new And(), ab2, ab0, ab1);", lines)
        self.assertIn("ab0.setFixedValue(1);", lines)
        self.assertIn("myGraph.addFactor(new Multiplexer(), ab3, ab0, ab2, ab1);", lines)
        self.assertEqual(lines[-1], "System.out.println(Arrays.toString(belief));")

    def test_negative_literal_argument(self) -> None:
        program = parse_source("var ab0 = beta(-0.5, ab1);")
        self.assertEqual(program.body[0], Assign("ab0", Call("beta", [Const(-0.5), Var("ab1")])))

    def test_unsupported_statement(self) -> None:
        with self.assertRaises(UnsupportedNodeError) as ctx:
            parse_source("while (ab0) { }")
        self.assertEqual(ctx.exception.kind, "WhileStatement")

    def test_syntax_error(self) -> None:
        with self.assertRaises(SchemaError):
            parse_source("var = ;")

    def test_declaration_shape(self) -> None:
        with self.assertRaises(SchemaError):
            parse_source("var a = flip(0.5), b = flip(0.5);")
        with self.assertRaises(MalformedLiteralAssignmentError):
            parse_source("var a;")
        with self.assertRaises(SchemaError):
            parse_source("if (ab0) { var ab3 = ab1; }")


class TestEstreePayload(unittest.TestCase):
    def test_program_from_estree_dict(self) -> None:
        payload = {
            "type": "Program",
            "body": [
                {
                    "type": "VariableDeclaration",
                    "kind": "var",
                    "declarations": [
                        {
                            "type": "VariableDeclarator",
                            "id": {"type": "Identifier", "name": "ab2"},
                            "init": {
                                "type": "CallExpression",
                                "callee": {"type": "Identifier", "name": "and"},
                                "arguments": [
                                    {"type": "Identifier", "name": "ab0"},
                                    {"type": "Identifier", "name": "ab1"},
                                ],
                            },
                        }
                    ],
                },
                {
                    "type": "ExpressionStatement",
                    "expression": {
                        "type": "CallExpression",
                        "callee": {"type": "Identifier", "name": "factor"},
                        "arguments": [{"type": "Identifier", "name": "ab2"}],
                    },
                },
            ],
        }
        program = program_from_estree(payload)
        self.assertEqual(
            program.body,
            [Assign("ab2", Call("and", [Var("ab0"), Var("ab1")])), Evidence("factor", "ab2")],
        )
        self.assertIs(coerce_program(program), program)

    def test_malformed_payload(self) -> None:
        with self.assertRaises(SchemaError):
            program_from_estree({"type": "Program", "body": [{"type": "VariableDeclaration", "declarations": []}]})
        with self.assertRaises(SchemaError):
            program_from_estree({"type": "Script", "body": []})
        with self.assertRaises(SchemaError):
            coerce_program(42)  # type: ignore[arg-type]

    def test_ir_dict_roundtrip(self) -> None:
        program = parse_source(COIN_TRACE)
        loaded = node_from_dict(program.to_dict())
        self.assertIsInstance(loaded, Program)
        self.assertEqual(loaded, program)

    def test_unknown_ir_kind(self) -> None:
        with self.assertRaises(UnsupportedNodeError):
            node_from_dict({"kind": "loop"})


if __name__ == "__main__":
    unittest.main()

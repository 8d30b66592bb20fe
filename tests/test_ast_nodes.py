"""
Tests for AST node behavior: equality, immutability and traversal.
"""

import dataclasses
import os
import sys
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from flc.lexer import SourceLocation
from flc.parser import (
    ASTVisitor, SourceSpan, Program, FuncDef, FuncParam, Type, WhileLoop,
    Return, ExpressionStatement, Identifier, I64Literal, Binary, Assign, Call,
    BinaryOperator, parse_string
)


class TestNodeValues(unittest.TestCase):

    def test_equality_ignores_span(self):
        location = SourceLocation("a.fl", 4, 2, 30)
        spanned = Identifier("x", span=SourceSpan(location, location))
        self.assertEqual(spanned, Identifier("x"))
        self.assertNotEqual(Identifier("x"), Identifier("y"))

    def test_different_node_types_are_not_equal(self):
        self.assertNotEqual(Return(None), ExpressionStatement(Identifier("x")))

    def test_nodes_are_immutable(self):
        node = I64Literal(5)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            node.value = 6

    def test_nodes_are_hashable(self):
        first = Binary(I64Literal(1), BinaryOperator.ADD, I64Literal(2))
        second = Binary(I64Literal(1), BinaryOperator.ADD, I64Literal(2))
        self.assertEqual(len({first, second}), 1)

    def test_span_string(self):
        span = SourceSpan(SourceLocation("a.fl", 1, 1, 0), SourceLocation("a.fl", 2, 4, 10))
        self.assertEqual(str(span), "a.fl:1:1-2:4")

    def test_comparison_operators(self):
        comparisons = {op for op in BinaryOperator if op.is_comparison}
        self.assertEqual({op.value for op in comparisons}, {"==", "!=", "<", "<=", ">", ">="})

    def test_get_function(self):
        program = Program((FuncDef("a", (), Type.VOID), FuncDef("b", (), Type.I64)))
        self.assertEqual(program.get_function("b").return_type, Type.I64)
        self.assertIsNone(program.get_function("c"))


class TestTraversal(unittest.TestCase):

    SOURCE = (
        "fn main(i64 n) i64 {\n"
        "    while n > 0 {\n"
        "        n -= 1\n"
        "    }\n"
        "    ret f(n, 2)\n"
        "}\n"
    )

    def test_children_in_source_order(self):
        call = Call("f", (Identifier("a"), I64Literal(1)))
        self.assertEqual(call.children(), [Identifier("a"), I64Literal(1)])
        self.assertEqual(Identifier("a").children(), [])

    def test_walk_is_depth_first(self):
        func_def = parse_string(self.SOURCE).func_defs[0]
        kinds = [type(node).__name__ for node in func_def.walk()]
        self.assertEqual(kinds, [
            "FuncDef", "FuncParam",
            "WhileLoop", "Binary", "Identifier", "I64Literal",
            "ExpressionStatement", "Assign", "Binary", "Identifier", "I64Literal",
            "Return", "Call", "Identifier", "I64Literal",
        ])

    def test_visitor_dispatch(self):
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_Identifier(self, node):
                self.names.append(node.name)

            def visit_Assign(self, node):
                self.names.append(f"{node.name}=")
                self.generic_visit(node)

        collector = NameCollector()
        parse_string(self.SOURCE).accept(collector)
        self.assertEqual(collector.names, ["n", "n=", "n", "n"])

    def test_visitor_return_value(self):
        class Evaluator(ASTVisitor):
            def visit_I64Literal(self, node):
                return node.value

            def visit_Binary(self, node):
                left, right = self.visit(node.left), self.visit(node.right)
                if node.operator == BinaryOperator.ADD:
                    return left + right
                if node.operator == BinaryOperator.MULTIPLY:
                    return left * right
                raise NotImplementedError(node.operator)

        statement = parse_string("fn f() {\n    2 + 3 * 4\n}").func_defs[0].body[0]
        self.assertEqual(statement.expr.accept(Evaluator()), 14)

    def test_param_and_loop_fields(self):
        func_def = parse_string(self.SOURCE).func_defs[0]
        self.assertEqual(func_def.params, (FuncParam(Type.I64, "n"),))
        loop = func_def.body[0]
        self.assertIsInstance(loop, WhileLoop)
        self.assertEqual(loop.body, (ExpressionStatement(
            Assign("n", Binary(Identifier("n"), BinaryOperator.SUBTRACT, I64Literal(1)))
        ),))


if __name__ == '__main__':
    unittest.main()

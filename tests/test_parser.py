"""
Tests for the ToyC parser.

Covers operator precedence and associativity, prototypes, definitions,
externs, the top-level expression wrapper and error reporting.

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from toyc.lexer import TokenType
from toyc.parser import (
    Parser, ANONYMOUS_FUNCTION_NAME, NumberLiteral, VariableReference,
    BinaryOperation, Call, Prototype, FunctionDefinition
)


def sexpr(source):
    result = Parser(source).parse_expression()
    assert result, result
    return result.value.to_sexpr()


class TestPrecedence(unittest.TestCase):
    """Precedence climbing."""

    def test_multiplication_binds_tighter(self):
        self.assertEqual(sexpr("1+2*3"), "(+ 1 (* 2 3))")
        self.assertEqual(sexpr("1*2+3"), "(+ (* 1 2) 3)")

    def test_parentheses_override(self):
        self.assertEqual(sexpr("(1+2)*3"), "(* (+ 1 2) 3)")

    def test_left_associative(self):
        self.assertEqual(sexpr("1-2-3"), "(- (- 1 2) 3)")
        self.assertEqual(sexpr("2*3*4"), "(* (* 2 3) 4)")

    def test_comparison_is_loosest(self):
        self.assertEqual(sexpr("a<b+c"), "(< a (+ b c))")
        self.assertEqual(sexpr("a*b<c-d"), "(< (* a b) (- c d))")

    def test_mixed_chain(self):
        self.assertEqual(sexpr("1+2*3-4"), "(- (+ 1 (* 2 3)) 4)")

    def test_tree_shape(self):
        expr = Parser("x+1").parse_expression().value
        self.assertEqual(expr, BinaryOperation("+", VariableReference("x"), NumberLiteral(1)))
        self.assertEqual(expr.children(), [VariableReference("x"), NumberLiteral(1)])

    def test_unknown_operator_ends_expression(self):
        parser = Parser("1 / 2")
        self.assertEqual(parser.parse_expression().value, NumberLiteral(1))
        self.assertTrue(parser.current_token.is_char("/"))


class TestPrimaries(unittest.TestCase):
    """Identifiers, calls, numbers and parentheses."""

    def test_calls(self):
        self.assertEqual(sexpr("f(1, x+2)"), "(call f 1 (+ x 2))")
        self.assertEqual(sexpr("f()"), "(call f)")
        self.assertEqual(sexpr("f(g(x))"), "(call f (call g x))")

    def test_call_node(self):
        expr = Parser("avg(a, 2)").parse_expression().value
        self.assertEqual(expr, Call("avg", [VariableReference("a"), NumberLiteral(2)]))

    def test_lookahead_after_expression(self):
        parser = Parser("x y")
        parser.parse_expression()
        self.assertEqual(parser.current_token.type, TokenType.IDENTIFIER)
        self.assertEqual(parser.current_token.value, "y")


class TestTopLevel(unittest.TestCase):
    """Prototypes, definitions, externs and the anonymous wrapper."""

    def test_prototype(self):
        result = Parser("foo(a b c)").parse_prototype()
        self.assertTrue(result)
        self.assertEqual(result.value, Prototype("foo", ["a", "b", "c"]))
        self.assertEqual(result.value.arity, 3)

    def test_empty_prototype(self):
        self.assertEqual(Parser("main()").parse_prototype().value, Prototype("main", []))

    def test_definition(self):
        result = Parser("def f(x) x*2").parse_definition()
        self.assertEqual(result.value, FunctionDefinition(
            Prototype("f", ["x"]),
            BinaryOperation("*", VariableReference("x"), NumberLiteral(2))
        ))
        self.assertEqual(result.value.to_sexpr(), "(def (prototype f (x)) (* x 2))")

    def test_extern(self):
        parser = Parser("extern sin(a)")
        result = parser.parse_extern()
        self.assertEqual(result.value, Prototype("sin", ["a"]))
        self.assertEqual(parser.current_token.type, TokenType.EOF)

    def test_top_level_expression_is_wrapped(self):
        result = Parser("1+2").parse_top_level_expression()
        self.assertTrue(result)
        self.assertEqual(result.value.prototype, Prototype(ANONYMOUS_FUNCTION_NAME, []))
        self.assertEqual(result.value.body.to_sexpr(), "(+ 1 2)")

    def test_custom_anonymous_name(self):
        result = Parser("7", anonymous_name="__repl").parse_top_level_expression()
        self.assertEqual(result.value.name, "__repl")


class TestParseErrors(unittest.TestCase):
    """Failures come back as results, never as exceptions."""

    def assertFails(self, source, method, message):
        parser = Parser(source)
        result = getattr(parser, method)()
        self.assertFalse(result)
        self.assertIsNone(result.value)
        self.assertIn(message, result.error.message)
        self.assertEqual(len(parser.errors), 1)
        return result

    def test_unexpected_token(self):
        result = self.assertFails(")", "parse_expression", "unknown token when expecting an expression")
        self.assertEqual(result.error.code, "P001")

    def test_missing_close_paren(self):
        self.assertFails("(1+2", "parse_expression", "Expected ')'")

    def test_bad_argument_list(self):
        self.assertFails("f(1 2)", "parse_expression", "Expected ')' or ',' in argument list")

    def test_prototype_without_name(self):
        self.assertFails("(a)", "parse_prototype", "Expected function name in prototype")

    def test_prototype_without_open_paren(self):
        self.assertFails("foo a", "parse_prototype", "Expected '(' in prototype")

    def test_prototype_with_commas(self):
        self.assertFails("foo(a, b)", "parse_prototype", "Expected ')' in prototype")

    def test_duplicate_parameter(self):
        result = self.assertFails("def f(a a) a", "parse_definition", "duplicate parameter name 'a'")
        self.assertEqual(result.error.code, "P003")

    def test_malformed_number(self):
        result = self.assertFails("1.2.3", "parse_expression", "invalid numeric literal")
        self.assertEqual(result.error.code, "P004")

    def test_definition_missing_body(self):
        self.assertFails("def f(x)", "parse_definition", "unknown token when expecting an expression")

    def test_error_in_nested_operand_propagates(self):
        self.assertFails("1 + (2 * )", "parse_expression", "unknown token when expecting an expression")


if __name__ == '__main__':
    unittest.main()

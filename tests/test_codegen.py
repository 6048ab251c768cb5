"""
Tests for ToyC code generation.

Exercises IR lowering for every node kind, every resolution error and
the module bookkeeping around definitions, externs and failed bodies.

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from toyc.backend import CodeGenerator
from toyc.backend.codegen import wrap_int32
from toyc.config import CompilerOptions
from toyc.parser import (
    Parser, FunctionDefinition, Prototype, BinaryOperation, VariableReference,
    NumberLiteral
)


class CodegenTestCase(unittest.TestCase):

    def setUp(self):
        self.gen = CodeGenerator()

    def define(self, source):
        parsed = Parser(source).parse_definition()
        self.assertTrue(parsed, parsed)
        return self.gen.codegen(parsed.value)

    def declare(self, source):
        parsed = Parser(source).parse_extern()
        self.assertTrue(parsed, parsed)
        return self.gen.codegen(parsed.value)

    def function_ir(self, name):
        return str(self.gen.get_function(name))


class TestExpressions(CodegenTestCase):
    """Lowering of expression nodes."""

    def test_constant_body(self):
        self.assertTrue(self.define("def five() 5"))
        self.assertIn("ret i32 5", self.function_ir("five"))

    def test_arithmetic(self):
        self.assertTrue(self.define("def f(x y) x + y * 2 - 1"))
        ir = self.function_ir("f")
        self.assertIn("mul i32", ir)
        self.assertIn("addtmp", ir)
        self.assertIn("subtmp", ir)

    def test_comparison_is_widened(self):
        self.assertTrue(self.define("def lt(a b) a < b"))
        ir = self.function_ir("lt")
        self.assertIn("icmp ult i32", ir)
        self.assertIn("zext i1", ir)

    def test_literals_wrap_to_32_bits(self):
        self.assertTrue(self.define("def big() 4294967301"))
        self.assertIn("ret i32 5", self.function_ir("big"))
        self.assertEqual(wrap_int32(2 ** 31), -2 ** 31)
        self.assertEqual(wrap_int32(-1), -1)

    def test_call(self):
        self.assertTrue(self.define("def sq(x) x*x"))
        self.assertTrue(self.define("def quad(x) sq(sq(x))"))
        self.assertEqual(self.function_ir("quad").count("call i32 @\"sq\""), 2)

    def test_recursion_resolves(self):
        self.assertTrue(self.define("def loop(x) loop(x)"))
        self.assertIn("@\"loop\"", self.function_ir("loop"))

    def test_parameter_names_kept(self):
        self.define("def average(x y) (x + y) * 5")
        self.assertEqual([a.name for a in self.gen.get_function("average").args], ["x", "y"])

    def test_module_name(self):
        self.assertIn("my_cool_jit", self.gen.get_ir())
        gen = CodeGenerator(options=CompilerOptions(module_name="other"))
        self.assertIn("other", gen.get_ir())

    def test_symbol_table_empty_after_function(self):
        self.define("def f(a b) a")
        self.assertEqual(len(self.gen.symbol_table), 0)
        self.assertIsNone(self.gen.context.builder)

    def test_unknown_node_type(self):
        with self.assertRaises(TypeError):
            self.gen.codegen("not a node")


class TestResolutionErrors(CodegenTestCase):
    """Errors carry codes and leave the module consistent."""

    def test_unknown_variable(self):
        result = self.define("def f(x) y")
        self.assertFalse(result)
        self.assertEqual(result.error.code, "C001")
        self.assertIn("unknown variable name 'y'", result.error.message)
        self.assertIsNone(self.gen.get_function("f"))

    def test_unknown_variable_suggestion(self):
        result = self.define("def f(count) coutn")
        self.assertEqual(result.error.suggestions, ["Did you mean 'count'?"])

    def test_unknown_function(self):
        result = self.define("def f(x) g(x)")
        self.assertEqual(result.error.code, "C002")
        self.assertIn("unknown function referenced", result.error.message)
        self.assertIsNone(self.gen.get_function("f"))

    def test_wrong_argument_count(self):
        self.assertTrue(self.define("def f(x) x"))
        result = self.define("def g(y) f(y, y)")
        self.assertEqual(result.error.code, "C003")
        self.assertIn("incorrect number of arguments", result.error.message)
        self.assertIsNone(self.gen.get_function("g"))
        self.assertEqual(len(self.gen.get_function("f").blocks), 1)

    def test_invalid_operator(self):
        definition = FunctionDefinition(
            Prototype("div", ["a", "b"]),
            BinaryOperation("/", VariableReference("a"), VariableReference("b"))
        )
        result = self.gen.codegen(definition)
        self.assertEqual(result.error.code, "C004")
        self.assertIn("invalid binary operator", result.error.message)
        self.assertIsNone(self.gen.get_function("div"))

    def test_name_reusable_after_failure(self):
        self.assertFalse(self.define("def f(x) y"))
        self.assertTrue(self.define("def f(x) x"))
        self.assertEqual(self.gen.defined_functions(), ["f"])

    def test_errors_are_collected(self):
        self.define("def f(x) y")
        self.define("def g(x) h()")
        self.assertEqual([e.diagnostic.code for e in self.gen.errors], ["C001", "C002"])


class TestDeclarations(CodegenTestCase):
    """Externs, redefinition and erasure."""

    def test_extern_declares(self):
        self.assertTrue(self.declare("extern sin(a)"))
        self.assertEqual(self.gen.declared_functions(), ["sin"])
        self.assertIn("declare i32 @\"sin\"(i32", self.gen.get_ir())

    def test_extern_twice_is_harmless(self):
        self.assertTrue(self.declare("extern sin(a)"))
        self.assertTrue(self.declare("extern sin(b)"))
        self.assertEqual(len(list(self.gen.module.functions)), 1)

    def test_definition_fills_extern(self):
        self.declare("extern foo(a)")
        self.assertTrue(self.define("def foo(a) a + 1"))
        self.assertEqual([f.name for f in self.gen.module.functions], ["foo"])
        self.assertEqual(self.gen.defined_functions(), ["foo"])

    def test_definition_binds_by_position(self):
        self.declare("extern foo(a)")
        self.assertTrue(self.define("def foo(b) b * 2"))
        self.assertIn("mul i32 %\"a\", 2", self.function_ir("foo"))

    def test_redefinition_rejected(self):
        self.assertTrue(self.define("def f(x) x"))
        result = self.define("def f(x) x + 1")
        self.assertEqual(result.error.code, "C005")
        self.assertIn("function cannot be redefined", result.error.message)
        ir = self.function_ir("f")
        self.assertIn("ret i32 %\"x\"", ir)
        self.assertNotIn("addtmp", ir)

    def test_arity_mismatch_rejected(self):
        self.declare("extern f(a b)")
        result = self.define("def f(x) x")
        self.assertEqual(result.error.code, "C006")
        self.assertEqual(self.gen.declared_functions(), ["f"])
        self.assertEqual(len(self.gen.get_function("f").args), 2)

    def test_failed_definition_keeps_extern(self):
        self.declare("extern f(a)")
        self.assertFalse(self.define("def f(a) nope"))
        self.assertEqual(self.gen.declared_functions(), ["f"])
        self.assertTrue(self.define("def f(a) a"))
        self.assertEqual(self.gen.defined_functions(), ["f"])

    def test_erase_function(self):
        self.define("def f(x) x")
        self.assertTrue(self.gen.erase_function("f"))
        self.assertFalse(self.gen.erase_function("f"))
        self.assertNotIn("@\"f\"", self.gen.get_ir())
        self.assertTrue(self.define("def f(x) x"))


if __name__ == '__main__':
    unittest.main()

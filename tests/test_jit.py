"""
End-to-end tests: source in, native code executed through the JIT.

Author: xwest
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from toyc.backend import JITEngine
from toyc.driver import compile_source


class TestJITExecution(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.engine = JITEngine()

    def run_function(self, source, name, *args):
        driver = compile_source(source)
        self.assertTrue(driver.report.succeeded, driver.report.diagnostics)
        result = self.engine.evaluate(driver.module, name, *args)
        self.assertTrue(result, result)
        return result.value

    def value_of(self, expression):
        return self.run_function(f"def f() {expression}", "f")

    def test_average(self):
        self.assertEqual(self.run_function("def average(x y) (x + y) * 5", "average", 10, 20), 150)

    def test_precedence(self):
        self.assertEqual(self.value_of("1+2*3"), 7)
        self.assertEqual(self.value_of("(1+2)*3"), 9)

    def test_left_associativity(self):
        self.assertEqual(self.value_of("1-2-3"), -4)

    def test_comparison(self):
        self.assertEqual(self.value_of("2<3"), 1)
        self.assertEqual(self.value_of("3<2"), 0)

    def test_comparison_is_unsigned(self):
        self.assertEqual(self.value_of("0-1 < 1"), 0)

    def test_calls_between_functions(self):
        source = "def sq(x) x*x\ndef sumsq(a b) sq(a) + sq(b)"
        self.assertEqual(self.run_function(source, "sumsq", 3, 4), 25)

    def test_overflow_wraps(self):
        self.assertEqual(self.value_of("2147483647 + 1"), -2147483648)


class TestJITRefusals(unittest.TestCase):

    def setUp(self):
        self.engine = JITEngine()

    def test_unresolved_extern(self):
        driver = compile_source("extern toycmissing(a)\ndef f(x) toycmissing(x)")
        result = self.engine.evaluate(driver.module, "f", 1)
        self.assertFalse(result)
        self.assertEqual(result.error.code, "J001")
        self.assertIn("toycmissing", result.error.message)

    def test_unknown_function(self):
        driver = compile_source("def f(x) x")
        self.assertFalse(self.engine.evaluate(driver.module, "g"))

    def test_wrong_argument_count(self):
        driver = compile_source("def f(x) x")
        self.assertFalse(self.engine.evaluate(driver.module, "f", 1, 2))


if __name__ == '__main__':
    unittest.main()

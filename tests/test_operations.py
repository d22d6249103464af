import unittest

import numpy as np
import sympy

from circuitsteps.operations import (
    HOLE, ONE, Divide, Negate, Sum, Text, Value, Variable,
    matrix_repr, matrix_to_latex, matrix_to_text, reciprocal, same_text, zeros,
)


class TestEquationRepr(unittest.TestCase):

    def test_values(self):
        self.assertEqual(Value(1.0).equation_repr(), "1")
        self.assertEqual(Value(-1).equation_repr(), "-1")
        self.assertEqual(Value(32).equation_repr(), "32")
        self.assertEqual(Value(0.5).equation_repr(), "0.5")

    def test_variable_renders_its_label(self):
        self.assertEqual(Variable("SRC(V)4: 32 V", 0.0).equation_repr(), "SRC(V)4: 32 V")

    def test_sums(self):
        self.assertEqual(Sum([]).equation_repr(), "0")
        self.assertEqual(Sum([reciprocal(Variable("R1"))]).equation_repr(), "1/R1")
        conductance = Sum([reciprocal(Variable("R2")), reciprocal(Variable("R3"))])
        self.assertEqual(conductance.equation_repr(), "1/R2 + 1/R3")

    def test_negation(self):
        self.assertEqual(Negate(reciprocal(Variable("R2"))).equation_repr(), "-1/R2")
        self.assertEqual(Negate(Sum([Variable("a"), Variable("b")])).equation_repr(), "-(a + b)")
        self.assertEqual(Negate(Sum([Variable("a")])).equation_repr(), "-a")

    def test_division_parenthesizes_compound_denominators(self):
        parallel = Divide(ONE, Sum([reciprocal(Variable("R3")), reciprocal(Variable("R4"))]))
        self.assertEqual(parallel.equation_repr(), "1/(1/R3 + 1/R4)")
        self.assertEqual(Divide(Variable("a"), reciprocal(Variable("b"))).equation_repr(), "a/(1/b)")

    def test_holes_render_as_placeholder(self):
        self.assertEqual(Negate().equation_repr(), f"-{HOLE}")
        self.assertEqual(Divide(None, Variable("R1")).equation_repr(), f"{HOLE}/R1")
        self.assertEqual(Divide().equation_repr(), f"{HOLE}/{HOLE}")

    def test_text_passes_through(self):
        self.assertEqual(Text("X = A^-1 * Z").equation_repr(), "X = A^-1 * Z")
        self.assertEqual(str(Text("note")), "note")

    def test_rendering_is_deterministic(self):
        op = Sum([Negate(reciprocal(Variable("R1"))), Value(2.5), Text("t")])
        first = op.equation_repr()
        for _ in range(5):
            self.assertEqual(op.equation_repr(), first)

    def test_same_text_compares_rendering_not_structure(self):
        self.assertTrue(same_text(Sum([Variable("x")]), Variable("x")))
        self.assertTrue(same_text(Sum([]), Value(0)))
        self.assertFalse(same_text(Variable("x"), Variable("y")))


class TestEvaluate(unittest.TestCase):

    def test_parallel_resistance(self):
        parallel = Divide(ONE, Sum([reciprocal(Variable("R3", 4)), reciprocal(Variable("R4", 4))]))
        self.assertAlmostEqual(parallel.evaluate(), 2.0)

    def test_negated_sum(self):
        self.assertAlmostEqual(Negate(Sum([Value(1), Variable("R", 2.5)])).evaluate(), -3.5)

    def test_text_and_holes_have_no_value(self):
        with self.assertRaises(ValueError):
            Text("TODO").evaluate()
        with self.assertRaises(ValueError):
            Negate().evaluate()


class TestSympyBridge(unittest.TestCase):

    def test_conversion(self):
        r1 = sympy.Symbol("R1")
        self.assertEqual(reciprocal(Variable("R1")).to_sympy(), 1 / r1)
        self.assertEqual(Sum([Variable("a"), Variable("a")]).to_sympy(), 2 * sympy.Symbol("a"))
        self.assertEqual(Value(3.0).to_sympy(), sympy.Integer(3))

    def test_text_cannot_convert(self):
        with self.assertRaises(TypeError):
            Text("TODO").to_sympy()
        with self.assertRaises(TypeError):
            Divide(ONE, None).to_sympy()


class TestMatrixHelpers(unittest.TestCase):

    def test_zeros(self):
        matrix = zeros((2, 3))
        self.assertEqual(matrix.shape, (2, 3))
        self.assertEqual(matrix_repr(matrix), [["0", "0", "0"], ["0", "0", "0"]])

    def test_matrix_to_text(self):
        matrix = zeros((2, 2))
        matrix[0, 0] = reciprocal(Variable("R1"))
        matrix[1, 0] = Value(-1)
        self.assertEqual(matrix_to_text(matrix), "[[1/R1, 0], [-1, 0]]")

    def test_matrix_to_latex(self):
        matrix = zeros((1, 2))
        matrix[0, 0] = reciprocal(Variable("R1"))
        latex = matrix_to_latex(matrix)
        self.assertIn("frac", latex)
        self.assertIn("matrix", latex)

    def test_empty_matrix(self):
        matrix = np.empty((0, 1), dtype=object)
        self.assertEqual(matrix_repr(matrix), [])
        self.assertEqual(matrix_to_text(matrix), "[]")


if __name__ == '__main__':
    unittest.main()

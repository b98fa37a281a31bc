import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from lambda7.basis import Morphism
from lambda7.compiler import FACTORIAL_OF_3, FACTORIAL_OF_4, generate_factorial_derivation
from lambda7.derivation import Literal
from lambda7.stack_runtime import StackEvaluator


class TestFactorialCompiler(unittest.TestCase):

    def setUp(self):
        self.ev = StackEvaluator()

    def test_factorial_of_4(self):
        self.assertEqual(self.ev.evaluate(generate_factorial_derivation(4)), 24)

    def test_factorial_of_0(self):
        derivation = generate_factorial_derivation(0)
        self.assertEqual(derivation, (Literal(1),))
        self.assertEqual(self.ev.evaluate(derivation), 1)

    def test_negative_input_is_base_case(self):
        self.assertEqual(generate_factorial_derivation(-3), (Literal(1),))

    def test_factorial_of_1_has_no_multiplications(self):
        self.assertEqual(generate_factorial_derivation(1), (Literal(1),))

    def test_left_fold_shape(self):
        derivation = generate_factorial_derivation(3)
        self.assertEqual(derivation, (
            Literal(1),
            Literal(2), Literal("multiply"), Morphism.APPLY,
            Literal(3), Literal("multiply"), Morphism.APPLY,
        ))
        self.assertIsInstance(derivation, tuple)

    def test_larger_values(self):
        expected = 1
        for n in range(1, 11):
            expected *= n
            derivation = generate_factorial_derivation(n)
            self.assertEqual(len(derivation), 1 + 3 * (n - 1))
            self.assertEqual(self.ev.evaluate(derivation), expected)
            self.assertEqual(self.ev.eval_steps, len(derivation))
            self.assertEqual(self.ev.warnings, [])

    def test_hand_unrolled_forms_agree_with_compiler(self):
        self.assertEqual(self.ev.evaluate(FACTORIAL_OF_3), self.ev.evaluate(generate_factorial_derivation(3)))
        self.assertEqual(self.ev.evaluate(FACTORIAL_OF_4), self.ev.evaluate(generate_factorial_derivation(4)))


if __name__ == "__main__":
    unittest.main()

import unittest
import sys
import os
import io
from contextlib import redirect_stderr

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from lambda7.basis import Morphism
from lambda7.derivation import Literal, SubDerivation
from lambda7.errors import InvalidDerivationStepError, MalformedBasisIndexError
from lambda7.field_runtime import FieldEvaluator, dominant_morphism, one_hot
from lambda7.tensor import TENSOR_3D_RULES, build_tensor_3d

I = Morphism.IDENTITY
APPLY = Morphism.APPLY
LAMBDA = Morphism.LAMBDA
NOT = Morphism.NOT
COND = Morphism.COND


class TestFieldEvaluator(unittest.TestCase):

    def test_initial_state_is_pure_identity(self):
        ev = FieldEvaluator()
        self.assertEqual(ev.field, one_hot(I))
        self.assertEqual(ev.history, [I, I])
        self.assertEqual(ev.dominant, I)

    def test_beta_reduction_sequence(self):
        ev = FieldEvaluator()
        field = ev.evaluate([LAMBDA, I, APPLY])
        self.assertEqual(field, one_hot(I))
        self.assertEqual(ev.eval_steps, 3)
        self.assertEqual(ev.history, [I, APPLY])

    def test_beta_reduction_trace(self):
        res = FieldEvaluator().evaluate_traced([LAMBDA, I, APPLY])
        self.assertEqual([e.kind for e in res.trace], ["collapse"] * 3)
        self.assertEqual(
            [e.detail["cell"] for e in res.trace],
            [("I", "I", "λ"), ("I", "λ", "I"), ("λ", "I", "@")],
        )
        self.assertEqual([e.detail["result"] for e in res.trace], ["λ", "I", "I"])

    def test_double_negation(self):
        self.assertEqual(FieldEvaluator().evaluate([NOT, NOT]), one_hot(I))

    def test_and_then_identity(self):
        self.assertEqual(FieldEvaluator().evaluate([Morphism.AND, I]), one_hot(I))

    def test_single_morphism_collapses_onto_it(self):
        for m in Morphism:
            self.assertEqual(FieldEvaluator().evaluate([m]), one_hot(m))

    def test_no_rule_accumulates_without_reset(self):
        ev = FieldEvaluator(history=[APPLY, LAMBDA], field={APPLY: 1, LAMBDA: 1})
        field = ev.evaluate([COND])
        expected = [0.0] * 7
        expected[APPLY] = expected[LAMBDA] = expected[COND] = 1.0
        self.assertEqual(field, expected)
        self.assertEqual(ev.history, [LAMBDA, COND])
        self.assertEqual(ev.trace[0].kind, "accumulate")
        self.assertEqual(ev.trace[0].detail["cell"], ("@", "λ", "?"))

    def test_accumulation_is_not_normalised(self):
        ev = FieldEvaluator()
        # (I,I,@) collapses to @, then (I,@,λ) to λ, then (@,λ,λ) has no rule
        field = ev.evaluate([APPLY, LAMBDA, LAMBDA, LAMBDA])
        self.assertEqual(field[LAMBDA], 3.0)
        self.assertEqual(sum(field), 3.0)

    def test_state_persists_across_calls(self):
        ev = FieldEvaluator()
        self.assertEqual(ev.evaluate([NOT]), one_hot(NOT))
        # history is now [I, ¬]; the next ¬ hits T_3D[I][¬][¬] = I
        self.assertEqual(ev.evaluate([NOT]), one_hot(I))

    def test_reset(self):
        ev = FieldEvaluator()
        ev.evaluate([APPLY, NOT, COND])
        ev.reset()
        self.assertEqual(ev.field, one_hot(I))
        self.assertEqual(ev.history, [I, I])

    def test_returned_field_is_a_copy(self):
        ev = FieldEvaluator()
        field = ev.evaluate([LAMBDA])
        field[0] = 99.0
        self.assertEqual(ev.field, one_hot(LAMBDA))

    def test_plain_ordinals_are_accepted(self):
        self.assertEqual(FieldEvaluator().evaluate([2, 0, 1]), one_hot(I))

    def test_custom_tensor(self):
        reordered = build_tensor_3d(rules=tuple(reversed(TENSOR_3D_RULES)))
        field = FieldEvaluator(tensor=reordered).evaluate([LAMBDA, I, APPLY])
        self.assertEqual(field, one_hot(APPLY))
        with self.assertRaises(TypeError):
            FieldEvaluator(tensor={})


class TestFieldEvaluatorErrors(unittest.TestCase):

    def test_literal_rejected_before_any_mutation(self):
        ev = FieldEvaluator()
        with self.assertRaises(InvalidDerivationStepError):
            ev.evaluate([LAMBDA, Literal(1)])
        self.assertEqual(ev.field, one_hot(I))
        self.assertEqual(ev.history, [I, I])

    def test_subderivation_rejected(self):
        with self.assertRaises(InvalidDerivationStepError):
            FieldEvaluator().evaluate([SubDerivation([LAMBDA])])

    def test_other_objects_rejected(self):
        for bad in ("λ", None, True, 1.0):
            with self.assertRaises(InvalidDerivationStepError):
                FieldEvaluator().evaluate([bad])

    def test_out_of_range_ordinal(self):
        with self.assertRaises(MalformedBasisIndexError):
            FieldEvaluator().evaluate([7])
        with self.assertRaises(MalformedBasisIndexError):
            FieldEvaluator().evaluate([-1])

    def test_bad_seeds(self):
        with self.assertRaises(MalformedBasisIndexError):
            FieldEvaluator(history=[I, 9])
        with self.assertRaises(MalformedBasisIndexError):
            FieldEvaluator(field={8: 1.0})
        with self.assertRaises(ValueError):
            FieldEvaluator(history=[I])
        with self.assertRaises(ValueError):
            FieldEvaluator(field=[1.0, 0.0])


class TestFieldHelpers(unittest.TestCase):

    def test_one_hot(self):
        self.assertEqual(one_hot(COND), [0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0])
        with self.assertRaises(MalformedBasisIndexError):
            one_hot(7)

    def test_dominant_breaks_ties_by_lowest_ordinal(self):
        self.assertEqual(dominant_morphism([0, 1, 1, 0, 0, 1, 0]), APPLY)
        self.assertEqual(dominant_morphism([0, 0, 0, 0, 1, 2, 0]), COND)
        self.assertEqual(dominant_morphism([0.0] * 7), I)
        with self.assertRaises(ValueError):
            dominant_morphism([1.0])


class TestFieldDebugOutput(unittest.TestCase):

    def test_debug_writes_transitions_to_stderr(self):
        buf = io.StringIO()
        with redirect_stderr(buf):
            FieldEvaluator(debug=True).evaluate([NOT, NOT])
        out = buf.getvalue()
        self.assertIn("[FieldEvaluator] Initial History: [I, I]", out)
        self.assertIn("Step 2: collapse ¬", out)
        self.assertIn("Evaluation finished in 2 steps.", out)

    def test_quiet_by_default(self):
        buf = io.StringIO()
        with redirect_stderr(buf):
            FieldEvaluator(debug=False).evaluate([NOT, NOT])
        self.assertEqual(buf.getvalue(), "")


if __name__ == "__main__":
    unittest.main()

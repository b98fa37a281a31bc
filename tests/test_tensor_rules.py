import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from lambda7.basis import Morphism, BASIS_SIZE, MORPHISM_NAMES, to_index, morphism_name
from lambda7.errors import MalformedBasisIndexError
from lambda7.tensor import (
    NO_RULE,
    TENSOR_3D_RULES,
    Tensor2D,
    build_tensor_2d,
    build_tensor_3d,
    format_tensor_2d,
    format_tensor_3d,
    get_tensor_2d,
    get_tensor_3d,
    is_no_rule,
)

I = Morphism.IDENTITY


class TestBasis(unittest.TestCase):

    def test_ordinals_are_fixed(self):
        self.assertEqual(BASIS_SIZE, 7)
        self.assertEqual(
            [m.name for m in Morphism],
            ["IDENTITY", "APPLY", "LAMBDA", "AND", "NOT", "COND", "PAIR"],
        )
        self.assertEqual([int(m) for m in Morphism], list(range(7)))

    def test_names(self):
        self.assertEqual("".join(MORPHISM_NAMES[m] for m in Morphism), "I@λ∧¬?⊗")
        self.assertEqual(morphism_name(5), "?")

    def test_index_validation(self):
        self.assertEqual(to_index(Morphism.PAIR), 6)
        self.assertEqual(to_index(0), 0)
        for bad in (7, -1, True, "I", 1.0, None):
            with self.assertRaises(MalformedBasisIndexError):
                to_index(bad)


class TestTensor2D(unittest.TestCase):

    def setUp(self):
        self.T = get_tensor_2d()

    def test_identity_absorption_both_sides(self):
        for x in Morphism:
            self.assertEqual(self.T[I, x], x)
            self.assertEqual(self.T[x, I], x)

    def test_involution(self):
        self.assertEqual(self.T[Morphism.NOT, Morphism.NOT], I)

    def test_beta_identity(self):
        self.assertEqual(self.T[Morphism.LAMBDA, Morphism.APPLY], I)

    def test_conditional_and_pairing_placeholders(self):
        self.assertEqual(self.T[I, Morphism.COND], Morphism.COND)
        self.assertEqual(self.T[Morphism.COND, I], Morphism.COND)
        self.assertEqual(self.T[Morphism.COND, Morphism.APPLY], Morphism.COND)
        self.assertEqual(self.T[I, Morphism.PAIR], Morphism.PAIR)

    def test_untouched_cells_have_no_rule(self):
        self.assertIs(self.T[Morphism.APPLY, Morphism.LAMBDA], NO_RULE)
        self.assertIs(self.T[Morphism.PAIR, Morphism.PAIR], NO_RULE)
        # 13 identity cells + ¬¬ + λ@ + ?@
        self.assertEqual(len(list(self.T.defined_cells())), 16)

    def test_lookup_rejects_bad_indices(self):
        with self.assertRaises(MalformedBasisIndexError):
            self.T[7, 0]
        with self.assertRaises(MalformedBasisIndexError):
            self.T.lookup(-1, 0)
        with self.assertRaises(TypeError):
            self.T[0]

    def test_tables_are_memoised_and_immutable(self):
        self.assertIs(get_tensor_2d(), self.T)
        self.assertEqual(build_tensor_2d(), self.T)
        with self.assertRaises(TypeError):
            self.T.cells[0][0] = Morphism.PAIR

    def test_shape_checked(self):
        with self.assertRaises(ValueError):
            Tensor2D([[NO_RULE] * 7] * 6)
        with self.assertRaises(TypeError):
            Tensor2D([[3] * 7] * 7)


class TestTensor3D(unittest.TestCase):

    def setUp(self):
        self.T = get_tensor_3d()

    def test_identity_first_position_forwards_incoming(self):
        for i in Morphism:
            for j in Morphism:
                if (i, j) == (Morphism.NOT, Morphism.NOT):
                    continue
                self.assertEqual(self.T[I, i, j], j)

    def test_identity_second_position_forwards_incoming(self):
        for i in Morphism:
            for j in Morphism:
                if j == I or (i, j) == (Morphism.LAMBDA, Morphism.APPLY):
                    continue
                self.assertEqual(self.T[i, I, j], j)

    def test_identity_incoming_keeps_prior_dominant(self):
        for i in Morphism:
            for j in Morphism:
                self.assertEqual(self.T[i, j, I], i)

    def test_double_negation(self):
        self.assertEqual(self.T[I, Morphism.NOT, Morphism.NOT], I)

    def test_beta_reduction_overrides_absorption(self):
        self.assertEqual(self.T[Morphism.LAMBDA, I, Morphism.APPLY], I)

    def test_defined_cells_are_exactly_those_touching_identity(self):
        cells = dict(self.T.defined_cells())
        self.assertEqual(len(cells), 7 ** 3 - 6 ** 3)
        for key in cells:
            self.assertIn(I, key)
        self.assertTrue(is_no_rule(self.T[Morphism.APPLY, Morphism.LAMBDA, Morphism.COND]))

    def test_rule_order_decides_overlaps(self):
        reordered = build_tensor_3d(rules=tuple(reversed(TENSOR_3D_RULES)))
        # Absorption applied last wins the overlapping cells
        self.assertEqual(reordered[Morphism.LAMBDA, I, Morphism.APPLY], Morphism.APPLY)
        self.assertEqual(reordered[I, Morphism.NOT, Morphism.NOT], Morphism.NOT)
        self.assertNotEqual(reordered, self.T)

    def test_memoised(self):
        self.assertIs(get_tensor_3d(), self.T)

    def test_lookup_rejects_bad_indices(self):
        with self.assertRaises(MalformedBasisIndexError):
            self.T[0, 0, 9]
        with self.assertRaises(MalformedBasisIndexError):
            self.T.lookup(False, 0, 0)


class TestNoRuleSentinel(unittest.TestCase):

    def test_sentinel_is_distinct_from_every_ordinal(self):
        self.assertFalse(NO_RULE)
        self.assertEqual(repr(NO_RULE), "NO_RULE")
        for m in Morphism:
            self.assertNotEqual(NO_RULE, m)
            self.assertFalse(is_no_rule(m))
        self.assertFalse(is_no_rule(None))


class TestTensorRendering(unittest.TestCase):

    def test_format_2d(self):
        text = format_tensor_2d(get_tensor_2d())
        lines = text.splitlines()
        self.assertEqual(len(lines), 3 + BASIS_SIZE + 1)
        self.assertIn("I    @    λ    ∧    ¬    ?    ⊗", lines[1])
        # Row ¬: only ¬->I and ¬->¬ defined
        self.assertTrue(lines[3 + 4].startswith("  ¬ | ¬    .    .    .    I"))

    def test_format_3d_has_one_plane_per_morphism(self):
        text = format_tensor_3d(get_tensor_3d())
        self.assertEqual(text.count("Plane "), BASIS_SIZE)
        self.assertIn("Plane λ (first morphism):", text)


if __name__ == "__main__":
    unittest.main()

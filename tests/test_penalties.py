"""Tests for the elastic-net penalty, soft-threshold operator and objective."""

import os
import sys
import unittest

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from shrinkage.penalties import objective, penalty, soft_threshold


class TestPenalty(unittest.TestCase):

    def test_lasso_term(self):
        """w = [1, -2, 3], lambda = 0.1, alpha = 1 -> 0.1 * (1+2+3) = 0.6"""
        w = np.array([1.0, -2.0, 3.0])
        self.assertAlmostEqual(penalty(w, 0.1, 1.0), 0.6)

    def test_ridge_term(self):
        """w = [1, 2, 3], lambda = 0.1, alpha = 0 -> 0.1/2 * (1+4+9) = 0.7"""
        w = np.array([1.0, 2.0, 3.0])
        self.assertAlmostEqual(penalty(w, 0.1, 0.0), 0.7)

    def test_mixed(self):
        w = np.array([1.0, 2.0])
        expected = 1.0 * (0.5 * (1 + 2) + 0.5 * 0.5 * (1 + 4))
        self.assertAlmostEqual(penalty(w, 1.0, 0.5), expected)

    def test_zero_weights(self):
        self.assertEqual(penalty(np.zeros(5), 2.0, 0.3), 0.0)


class TestSoftThreshold(unittest.TestCase):

    def test_shrinks_toward_zero(self):
        self.assertAlmostEqual(soft_threshold(3.0, 1.0), 2.0)
        self.assertAlmostEqual(soft_threshold(-3.0, 1.0), -2.0)

    def test_inside_threshold_is_zero(self):
        self.assertEqual(soft_threshold(0.5, 1.0), 0.0)
        self.assertEqual(soft_threshold(-1.0, 1.0), 0.0)

    def test_zero_gamma_is_identity(self):
        self.assertEqual(soft_threshold(-4.25, 0.0), -4.25)


class TestObjective(unittest.TestCase):

    def test_perfect_fit_leaves_only_penalty(self):
        X = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        w = np.array([2.0, -1.0])
        y = 0.5 + X @ w
        value = objective(X, y, 0.5, w, lambda_=0.2, alpha=0.3)
        self.assertAlmostEqual(value, penalty(w, 0.2, 0.3))

    def test_zero_weights(self):
        X = np.ones((4, 2))
        y = np.array([1.0, -1.0, 1.0, -1.0])
        # residual is y itself: (1/2n) * 4 = 0.5
        self.assertAlmostEqual(objective(X, y, 0.0, np.zeros(2), 1.0, 0.5), 0.5)


if __name__ == "__main__":
    unittest.main()

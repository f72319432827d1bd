import os
import sys
import tempfile
import unittest

import numpy as np
import pandas as pd

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from shrinkage.dataset import (
    Design,
    build_design,
    encode_categorical,
    load_table,
    partition,
    permutation,
)
from shrinkage.errors import EmptyInput, InvalidProportion, NonNumericColumn


def make_table(n=37, seed=0):
    rng = np.random.default_rng(seed)
    return pd.DataFrame(
        {
            "Year": np.arange(2000, 2000 + n) % 16 + 2000,
            "GDP": rng.lognormal(7.0, 1.0, n),
            "Schooling": rng.uniform(4.0, 18.0, n),
            "Life expectancy": rng.normal(70.0, 8.0, n),
        }
    )


class TestPartition(unittest.TestCase):

    def test_sizes_add_up_for_many_seeds_and_proportions(self):
        table = make_table()
        n = len(table)
        for seed in range(10):
            for p in (0.1, 0.33, 0.5, 0.8, 0.95):
                train, test = partition(table, p, seed)
                self.assertEqual(len(train) + len(test), n)
                self.assertLessEqual(abs(len(train) / n - p), 1.0 / n)

    def test_partitions_are_disjoint_and_cover_table(self):
        table = make_table()
        train, test = partition(table, 0.7, seed=3)
        self.assertEqual(set(train.index) & set(test.index), set())
        self.assertEqual(set(train.index) | set(test.index), set(table.index))

    def test_same_seed_same_split(self):
        table = make_table()
        train_a, test_a = partition(table, 0.8, seed=13)
        train_b, test_b = partition(table, 0.8, seed=13)
        pd.testing.assert_frame_equal(train_a, train_b)
        pd.testing.assert_frame_equal(test_a, test_b)

    def test_different_seed_different_split(self):
        table = make_table()
        train_a, _ = partition(table, 0.8, seed=1)
        train_b, _ = partition(table, 0.8, seed=2)
        self.assertNotEqual(list(train_a.index), list(train_b.index))

    def test_train_size_is_rounded(self):
        table = make_table(n=10)
        train, test = partition(table, 0.26, seed=0)
        self.assertEqual(len(train), 3)
        self.assertEqual(len(test), 7)

    def test_returns_copies(self):
        table = make_table()
        before = table.copy()
        train, _ = partition(table, 0.5, seed=0)
        train.iloc[:, 1] = -1.0
        pd.testing.assert_frame_equal(table, before)

    def test_invalid_proportion(self):
        table = make_table()
        for p in (0.0, 1.0, -0.2, 1.5):
            with self.assertRaises(InvalidProportion):
                partition(table, p, seed=0)

    def test_empty_table(self):
        with self.assertRaises(EmptyInput):
            partition(make_table().iloc[0:0], 0.5, seed=0)

    def test_permutation_is_seeded(self):
        np.testing.assert_array_equal(permutation(50, 4), permutation(50, 4))
        self.assertEqual(sorted(permutation(50, 4)), list(range(50)))


class TestBuildDesign(unittest.TestCase):

    def test_splits_response_and_predictors(self):
        table = make_table(n=12)
        design = build_design(table, "Life expectancy")
        self.assertIsInstance(design, Design)
        self.assertEqual(design.X.shape, (12, 3))
        self.assertEqual(design.feature_names, ("Year", "GDP", "Schooling"))
        np.testing.assert_array_equal(design.y, table["Life expectancy"].to_numpy())
        np.testing.assert_array_equal(design.X[:, 1], table["GDP"].to_numpy())
        self.assertEqual(design.n_samples, 12)
        self.assertEqual(design.n_features, 3)

    def test_preserves_row_order(self):
        table = make_table(n=20).iloc[::-1]
        design = build_design(table, "Life expectancy")
        np.testing.assert_array_equal(design.y, table["Life expectancy"].to_numpy())

    def test_coerces_numeric_strings_and_bools(self):
        table = pd.DataFrame(
            {
                "a": ["1.5", "2", "3.25"],
                "flag": [True, False, True],
                "y": [1.0, 2.0, 3.0],
            }
        )
        design = build_design(table, "y")
        np.testing.assert_allclose(design.X, [[1.5, 1.0], [2.0, 0.0], [3.25, 1.0]])
        self.assertEqual(design.X.dtype, np.float64)

    def test_non_numeric_column(self):
        table = make_table(n=5)
        table["Status"] = ["Developing"] * 4 + ["Developed"]
        with self.assertRaises(NonNumericColumn) as ctx:
            build_design(table, "Life expectancy")
        self.assertEqual(ctx.exception.columns, ("Status",))
        self.assertIn("Status", str(ctx.exception))

    def test_non_numeric_response(self):
        table = pd.DataFrame({"x": [1.0, 2.0], "y": ["high", "low"]})
        with self.assertRaises(NonNumericColumn):
            build_design(table, "y")

    def test_arrays_are_independent_copies(self):
        table = make_table(n=8)
        design = build_design(table, "Life expectancy")
        table.loc[:, "GDP"] = 0.0
        table.loc[:, "Life expectancy"] = 0.0
        self.assertTrue(np.all(design.X[:, 1] > 0.0))
        self.assertTrue(np.any(design.y != 0.0))

    def test_missing_response_column(self):
        with self.assertRaises(KeyError):
            build_design(make_table(n=4), "Lifespan")

    def test_empty_table(self):
        with self.assertRaises(EmptyInput):
            build_design(make_table().iloc[0:0], "Life expectancy")

    def test_missing_values_rejected(self):
        table = make_table(n=4)
        table.loc[2, "GDP"] = np.nan
        with self.assertRaises(ValueError):
            build_design(table, "Life expectancy")


class TestEncodeCategorical(unittest.TestCase):

    def test_treatment_coding(self):
        table = pd.DataFrame(
            {
                "Year": [2014, 2015, 2015],
                "Status": ["Developing", "Developed", "Developing"],
                "y": [60.0, 80.0, 65.0],
            }
        )
        encoded = encode_categorical(table, ["Status"])
        self.assertEqual(list(encoded.columns), ["Year", "StatusDeveloping", "y"])
        np.testing.assert_array_equal(encoded["StatusDeveloping"], [1.0, 0.0, 1.0])
        self.assertIn("Status", table.columns)

    def test_absent_columns_are_ignored(self):
        table = make_table(n=3)
        pd.testing.assert_frame_equal(encode_categorical(table, ["Status"]), table)


class TestLoadTable(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "life.csv")
        pd.DataFrame(
            {
                "Country": ["A", "A", "B", "B", "C"],
                "Year": [2014, 2015, 2014, 2015, 2015],
                "Status": ["Developing", "Developing", "Developed", "Developed", "Developing"],
                "Life expectancy ": [61.0, 62.5, 80.1, np.nan, 55.0],
                " BMI ": [20.1, 20.4, 25.3, 25.9, 18.7],
            }
        ).to_csv(self.path, index=False)

    def tearDown(self):
        self.tmp.cleanup()

    def test_load(self):
        table = load_table(self.path, "Life expectancy")
        self.assertEqual(
            list(table.columns), ["Year", "StatusDeveloping", "Life expectancy", "BMI"]
        )
        self.assertEqual(len(table), 4)
        design = build_design(table, "Life expectancy")
        self.assertEqual(design.X.shape, (4, 3))

    def test_missing_response(self):
        with self.assertRaises(KeyError):
            load_table(self.path, "Lifespan")

    def test_everything_missing(self):
        pd.DataFrame({"x": [1.0, np.nan], "y": [np.nan, 2.0]}).to_csv(self.path, index=False)
        with self.assertRaises(EmptyInput):
            load_table(self.path, "y", drop_columns=(), categorical_columns=())


if __name__ == "__main__":
    unittest.main()

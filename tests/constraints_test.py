# Copyright 2024 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for optimal control constraint containers."""

from absl.testing import absltest
from absl.testing import parameterized

import jax.numpy as jnp
from jax import config
import numpy as np

from ocpbridge.core import (
    BoxConstraint,
    DimensionMismatchError,
    GeneralConstraint,
    InvalidBoundsError,
    validate_bounds,
)

config.update('jax_enable_x64', True)


class ValidateBoundsTest(parameterized.TestCase):

    def test_valid_bounds(self):
        lower, upper = validate_bounds([0.0, -1.0], [0.0, 1.0], dim=2)
        np.testing.assert_array_equal(lower, [0.0, -1.0])
        np.testing.assert_array_equal(upper, [0.0, 1.0])
        self.assertIsInstance(lower, np.ndarray)
        self.assertIsInstance(upper, np.ndarray)
        self.assertFalse(lower.flags.writeable)

    def test_bounds_are_copied(self):
        lower_in = np.array([0.0, 0.0])
        lower, _ = validate_bounds(lower_in, [1.0, 1.0])
        lower_in[0] = 5.0
        self.assertEqual(lower[0], 0.0)

    def test_invalid_bounds_report_indices(self):
        with self.assertRaises(InvalidBoundsError) as ctx:
            validate_bounds([0.0, 2.0, 0.0], [-1.0, 3.0, -0.5])
        self.assertEqual(ctx.exception.indices, (0, 2))

    @parameterized.parameters(
        ([0.0, 0.0], [1.0], None),
        ([0.0], [1.0], 2),
        ([[0.0]], [[1.0]], None),
    )
    def test_dimension_mismatch(self, lower, upper, dim):
        with self.assertRaises(DimensionMismatchError):
            validate_bounds(lower, upper, dim=dim)

    def test_infinite_bounds(self):
        lower, upper = validate_bounds([-np.inf], [np.inf])
        self.assertTrue(np.isinf(lower[0]))


class BoxConstraintTest(parameterized.TestCase):

    def test_input_box(self):
        box = BoxConstraint([-1.0], [1.0], on='input')
        self.assertEqual(box.constraint_count, 1)
        x = jnp.zeros(3)
        np.testing.assert_allclose(box.evaluate(x, jnp.array([0.5]), 0), [0.5])
        self.assertTrue(box.is_satisfied(x, jnp.array([0.5]), 0))
        self.assertFalse(box.is_satisfied(x, jnp.array([1.5]), 0))
        self.assertAlmostEqual(float(box.violation(x, jnp.array([1.5]), 0)), 0.5)

    def test_state_box(self):
        box = BoxConstraint([0.0, 0.0], [1.0, 1.0], on='state')
        self.assertAlmostEqual(
            float(box.violation(jnp.array([-0.25, 0.5]), jnp.zeros(1), 0)), 0.25)

    def test_wrong_vector_dimension(self):
        box = BoxConstraint([0.0, 0.0], [1.0, 1.0], on='state')
        with self.assertRaises(DimensionMismatchError):
            box.evaluate(jnp.zeros(3), jnp.zeros(1), 0)

    def test_invalid_bounds(self):
        with self.assertRaises(InvalidBoundsError):
            BoxConstraint([1.0], [0.0])

    def test_invalid_target(self):
        with self.assertRaises(ValueError):
            BoxConstraint([0.0], [1.0], on='time')


class GeneralConstraintTest(parameterized.TestCase):

    def test_evaluate(self):
        constraint = GeneralConstraint(
            lambda x, u, n: jnp.array([x @ x, u[0] * n]), [0.0, -1.0], [1.0, 1.0])
        self.assertEqual(constraint.constraint_count, 2)
        g = constraint.evaluate(jnp.array([1.0, 1.0]), jnp.array([0.5]), 4)
        np.testing.assert_allclose(g, [2.0, 2.0])
        self.assertAlmostEqual(
            float(constraint.violation(jnp.array([1.0, 1.0]), jnp.array([0.5]), 4)), 1.0)

    def test_scalar_constraint(self):
        constraint = GeneralConstraint(lambda x, u, n: x[0] - u[0], [0.0], [0.0])
        self.assertTrue(constraint.is_satisfied(jnp.array([2.0]), jnp.array([2.0]), 0))

    def test_wrong_output_dimension(self):
        constraint = GeneralConstraint(lambda x, u, n: x, [0.0], [1.0])
        with self.assertRaises(DimensionMismatchError):
            constraint.evaluate(jnp.zeros(2), jnp.zeros(1), 0)

    def test_clone(self):
        constraint = GeneralConstraint(lambda x, u, n: x, [0.0], [1.0])
        clone = constraint.clone()
        self.assertIsNot(clone, constraint)
        np.testing.assert_array_equal(clone.upper_bound, [1.0])


if __name__ == '__main__':
    absltest.main()

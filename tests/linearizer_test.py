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

"""Tests for linear systems and linearizers."""

from absl.testing import absltest
from absl.testing import parameterized

import jax.numpy as jnp
from jax import config
import numpy as np

from ocpbridge.control import ConstantController
from ocpbridge.core import DimensionMismatchError
from ocpbridge.systems import (
    AutoDiffLinearizer,
    FunctionalDiscreteSystem,
    LinearizerConfig,
    LinearTimeInvariantSystem,
    NumDiffLinearizer,
    make_linearizer,
)

config.update('jax_enable_x64', True)

DT = 0.1


def pendulum(x, u, n, params):
    dt = params['dt']
    return jnp.array([
        x[0] + dt * x[1],
        x[1] + dt * (-jnp.sin(x[0]) + u[0] * x[1]),
    ])


def pendulum_jacobians(x, u):
    A = np.array([[1.0, DT], [-DT * np.cos(x[0]), 1.0 + DT * u[0]]])
    B = np.array([[0.0], [DT * x[1]]])
    return A, B


class LinearTimeInvariantSystemTest(parameterized.TestCase):

    def test_propagate(self):
        A = jnp.array([[1.0, 2.0], [0.0, 1.0]])
        B = jnp.array([[1.0], [3.0]])
        system = LinearTimeInvariantSystem(A, B)
        self.assertEqual(system.state_dim, 2)
        self.assertEqual(system.control_dim, 1)
        np.testing.assert_allclose(
            system.propagate_controlled(jnp.array([1.0, 1.0]), jnp.array([2.0]), 0),
            [5.0, 7.0])

    def test_derivatives(self):
        A = jnp.eye(3)
        B = jnp.ones((3, 2))
        system = LinearTimeInvariantSystem(A, B)
        A_out, B_out = system.get_derivatives(jnp.zeros(3), jnp.zeros(2), 0)
        np.testing.assert_array_equal(A_out, A)
        np.testing.assert_array_equal(B_out, B)
        np.testing.assert_array_equal(system.get_derivative_state(jnp.zeros(3), jnp.zeros(2)), A)
        np.testing.assert_array_equal(system.get_derivative_control(jnp.zeros(3), jnp.zeros(2)), B)

    @parameterized.parameters(
        (jnp.ones((2, 3)), jnp.ones((2, 1))),
        (jnp.ones((2, 2)), jnp.ones((3, 1))),
        (jnp.ones(2), jnp.ones((2, 1))),
    )
    def test_invalid_matrices(self, A, B):
        with self.assertRaises(DimensionMismatchError):
            LinearTimeInvariantSystem(A, B)


class LinearizerTest(parameterized.TestCase):

    def setUp(self):
        super().setUp()
        self.system = FunctionalDiscreteSystem(
            pendulum, state_dim=2, control_dim=1, params={'dt': DT})

    @parameterized.parameters(
        (np.array([0.0, 0.0]), np.array([0.0])),
        (np.array([0.4, -1.2]), np.array([0.5])),
        (np.array([3.0, 2.0]), np.array([-2.0])),
    )
    def test_autodiff_matches_analytic(self, x, u):
        A, B = AutoDiffLinearizer(self.system).get_derivatives(x, u, 0)
        A_true, B_true = pendulum_jacobians(x, u)
        np.testing.assert_allclose(A, A_true, atol=1e-12)
        np.testing.assert_allclose(B, B_true, atol=1e-12)

    @parameterized.parameters(
        (np.array([0.0, 0.0]), np.array([0.0]), True),
        (np.array([0.4, -1.2]), np.array([0.5]), True),
        (np.array([3.0, 2.0]), np.array([-2.0]), True),
        (np.array([0.4, -1.2]), np.array([0.5]), False),
    )
    def test_numdiff_matches_analytic(self, x, u, double_sided):
        linearizer = NumDiffLinearizer(self.system, double_sided=double_sided)
        A, B = linearizer.get_derivatives(x, u, 0)
        A_true, B_true = pendulum_jacobians(x, u)
        np.testing.assert_allclose(A, A_true, atol=1e-6)
        np.testing.assert_allclose(B, B_true, atol=1e-6)

    def test_numdiff_custom_step(self):
        linearizer = NumDiffLinearizer(self.system, eps=1e-5)
        x, u = np.array([0.4, -1.2]), np.array([0.5])
        A, _ = linearizer.get_derivatives(x, u, 0)
        np.testing.assert_allclose(A, pendulum_jacobians(x, u)[0], atol=1e-6)

    def test_numdiff_leaves_system_controller_untouched(self):
        controller = ConstantController(u=jnp.array([3.0]))
        self.system.set_controller(controller)
        NumDiffLinearizer(self.system).get_derivatives(
            np.array([0.1, 0.2]), np.array([0.0]), 0)
        self.assertIs(self.system.get_controller(), controller)
        np.testing.assert_array_equal(controller.get_control(), [3.0])

    def test_linearizer_propagates_wrapped_system(self):
        linearizer = AutoDiffLinearizer(self.system)
        x, u = jnp.array([0.4, -1.2]), jnp.array([0.5])
        np.testing.assert_allclose(
            linearizer.propagate_controlled(x, u, 0),
            self.system.propagate_controlled(x, u, 0))

    def test_linearizer_dimension_mismatch(self):
        with self.assertRaises(DimensionMismatchError):
            NumDiffLinearizer(self.system).get_derivatives(np.zeros(3), np.zeros(1), 0)
        with self.assertRaises(DimensionMismatchError):
            AutoDiffLinearizer(self.system).get_derivatives(np.zeros(2), np.zeros(2), 0)

    def test_clone_owns_system_copy(self):
        self.system.set_controller(ConstantController(u=jnp.array([1.0])))
        linearizer = NumDiffLinearizer(self.system)
        clone = linearizer.clone()
        self.assertIsNot(clone.system, self.system)
        self.assertIsNot(clone.system.get_controller(), self.system.get_controller())

    @parameterized.parameters(
        ('autodiff', AutoDiffLinearizer),
        ('numdiff', NumDiffLinearizer),
    )
    def test_make_linearizer(self, method, expected_type):
        linearizer = make_linearizer(self.system, LinearizerConfig(method=method))
        self.assertIsInstance(linearizer, expected_type)
        self.assertIs(linearizer.system, self.system)

    def test_config_validation(self):
        with self.assertRaises(ValueError):
            LinearizerConfig(method='symbolic')
        with self.assertRaises(ValueError):
            LinearizerConfig(eps=0.0)
        self.assertEqual(
            LinearizerConfig().to_dict(),
            {'method': 'numdiff', 'eps': None, 'double_sided': True})


if __name__ == '__main__':
    absltest.main()

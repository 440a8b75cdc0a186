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

"""Tests for the scipy-backed NLP solver."""

from absl.testing import absltest
from absl.testing import parameterized

import jax.numpy as jnp
from jax import config
import numpy as np

from ocpbridge.core import ConfigurationError, DimensionMismatchError, NlpStatus
from ocpbridge.nlp import (
    BoxConstraintContainer,
    DiscreteCostEvaluator,
    FunctionConstraintContainer,
    Nlp,
    NlpSolverConfig,
    OptVector,
    ScipyNlpSolver,
)

config.update('jax_enable_x64', True)


class DistanceCost(DiscreteCostEvaluator):
    """0.5 * ||x - target||^2."""

    def __init__(self, target):
        super().__init__()
        self.target = jnp.asarray(target)

    def cost(self, x):
        d = x - self.target
        return 0.5 * d @ d


class ToyNlp(Nlp):
    """Projection of a point onto a constraint set."""

    def __init__(self, target, make_constraints=None):
        self.opt_variables = OptVector(len(target))
        self.cost_evaluator = DistanceCost(target)
        self.cost_evaluator.set_opt_vector(self.opt_variables)
        self.constraints = (None if make_constraints is None
                            else make_constraints(self.opt_variables))
        self.updates = 0

    def update_problem(self):
        self.updates += 1


class NlpTest(absltest.TestCase):

    def test_unconstrained_accessors(self):
        nlp = ToyNlp([1.0, 2.0])
        self.assertEqual(nlp.get_variable_count(), 2)
        self.assertEqual(nlp.get_constraint_count(), 0)
        self.assertEqual(nlp.evaluate_constraints().shape, (0,))
        self.assertEqual(nlp.evaluate_constraint_jacobian().shape, (0, 2))
        lower, upper = nlp.get_variable_bounds()
        self.assertTrue(np.all(np.isneginf(lower)) and np.all(np.isposinf(upper)))
        self.assertAlmostEqual(nlp.evaluate_cost(), 2.5)
        np.testing.assert_allclose(nlp.evaluate_cost_gradient(), [-1.0, -2.0])

    def test_function_constraints(self):
        nlp = ToyNlp([1.0, 1.0], lambda v: FunctionConstraintContainer(
            v, lambda x: jnp.array([x @ x, x[0] - x[1]]), [-jnp.inf, 0.0], [1.0, 0.0]))
        nlp.extract_optimization_vars([2.0, 1.0])
        np.testing.assert_allclose(nlp.evaluate_constraints(), [5.0, 1.0])
        np.testing.assert_allclose(nlp.evaluate_constraint_jacobian(),
                                   [[4.0, 2.0], [1.0, -1.0]])
        self.assertAlmostEqual(nlp.constraints.evaluate_violation(), 4.0)

    def test_function_constraint_length_is_checked(self):
        nlp = ToyNlp([1.0, 1.0], lambda v: FunctionConstraintContainer(
            v, lambda x: jnp.array([x @ x]), [-jnp.inf, -jnp.inf], [1.0, 1.0]))
        nlp.extract_optimization_vars([2.0, 0.0])
        self.assertEqual(nlp.get_constraint_count(), 2)
        with self.assertRaises(DimensionMismatchError):
            nlp.evaluate_constraints()
        with self.assertRaises(DimensionMismatchError):
            nlp.constraints.evaluate_violation()
        with self.assertRaises(DimensionMismatchError):
            ScipyNlpSolver(nlp).solve()

    def test_evaluator_belongs_to_one_vector(self):
        cost = DistanceCost([0.0, 0.0])
        first, second = OptVector(2), OptVector(2)
        cost.set_opt_vector(first)
        cost.set_opt_vector(first)
        with self.assertRaises(ConfigurationError):
            cost.set_opt_vector(second)
        self.assertIs(cost.opt_vector, first)


class ScipyNlpSolverTest(parameterized.TestCase):

    def test_unconstrained(self):
        nlp = ToyNlp([1.0, -2.0])
        solution = ScipyNlpSolver(nlp, NlpSolverConfig(method='L-BFGS-B')).solve()
        self.assertTrue(solution.converged)
        self.assertEqual(solution.status, NlpStatus.SOLVED)
        np.testing.assert_allclose(nlp.get_optimization_vars(), [1.0, -2.0], atol=1e-5)
        np.testing.assert_array_equal(solution.x, nlp.get_optimization_vars())
        self.assertEqual(nlp.updates, 1)

    @parameterized.parameters('SLSQP', 'L-BFGS-B')
    def test_variable_bounds(self, method):
        nlp = ToyNlp([2.0, -2.0], lambda v: BoxConstraintContainer(
            v, [-1.0, -1.0], [1.0, 1.0]))
        ScipyNlpSolver(nlp, NlpSolverConfig(method=method)).solve()
        np.testing.assert_allclose(nlp.get_optimization_vars(), [1.0, -1.0], atol=1e-6)

    def test_inequality_constraint(self):
        nlp = ToyNlp([1.0, 1.0], lambda v: FunctionConstraintContainer(
            v, lambda x: jnp.array([x @ x]), [-jnp.inf], [1.0]))
        nlp.opt_variables.set_initial_guess([0.1, 0.2])
        solution = ScipyNlpSolver(nlp, NlpSolverConfig(tolerance=1e-10)).solve()
        self.assertTrue(solution.converged)
        np.testing.assert_allclose(solution.x, [2 ** -0.5, 2 ** -0.5], atol=1e-5)
        self.assertLess(nlp.constraints.evaluate_violation(), 1e-6)

    def test_equality_constraint(self):
        nlp = ToyNlp([2.0, 0.0], lambda v: FunctionConstraintContainer(
            v, lambda x: x[0] + x[1], [1.0], [1.0]))
        solution = ScipyNlpSolver(nlp, NlpSolverConfig(tolerance=1e-10)).solve()
        np.testing.assert_allclose(solution.x, [1.5, -0.5], atol=1e-5)

    def test_starts_from_initial_guess(self):
        nlp = ToyNlp([1.0, 1.0])
        nlp.extract_optimization_vars([100.0, 100.0])
        nlp.opt_variables.set_initial_guess([1.0, 1.0])
        solution = ScipyNlpSolver(nlp, NlpSolverConfig(method='L-BFGS-B')).solve()
        self.assertAlmostEqual(solution.cost, 0.0)

    def test_gradient_free(self):
        nlp = ToyNlp([0.5, 0.5], lambda v: FunctionConstraintContainer(
            v, lambda x: jnp.array([x[0]]), [-jnp.inf], [0.0]))
        config_ = NlpSolverConfig(method='COBYLA', tolerance=1e-8,
                                  max_iterations=1000)
        solution = ScipyNlpSolver(nlp, config_).solve()
        np.testing.assert_allclose(solution.x, [0.0, 0.5], atol=1e-4)

    def test_without_nlp(self):
        with self.assertRaises(ConfigurationError):
            ScipyNlpSolver().solve()

    def test_set_problem_and_configure(self):
        solver = ScipyNlpSolver()
        nlp = ToyNlp([3.0])
        solver.set_problem(nlp)
        solver.configure(NlpSolverConfig(method='L-BFGS-B'))
        self.assertEqual(solver.config.method, 'L-BFGS-B')
        np.testing.assert_allclose(solver.solve().x, [3.0], atol=1e-5)

    def test_unsupported_method_for_constraints(self):
        nlp = ToyNlp([1.0, 1.0], lambda v: FunctionConstraintContainer(
            v, lambda x: jnp.array([x @ x]), [-jnp.inf], [1.0]))
        with self.assertRaises(ConfigurationError):
            ScipyNlpSolver(nlp, NlpSolverConfig(method='L-BFGS-B')).solve()


class NlpSolverConfigTest(parameterized.TestCase):

    def test_defaults(self):
        config_ = NlpSolverConfig()
        self.assertEqual(config_.method, 'SLSQP')
        self.assertEqual(config_.to_dict(), {'maxiter': 200})
        self.assertTrue(NlpSolverConfig(verbose=True).to_dict()['disp'])

    def test_extra_options(self):
        config_ = NlpSolverConfig(max_iterations=10, extra_options={'eps': 1e-6})
        self.assertEqual(config_.to_dict(), {'maxiter': 10, 'eps': 1e-6})

    @parameterized.parameters(
        dict(max_iterations=0),
        dict(tolerance=0.0),
        dict(tolerance=-1e-3),
    )
    def test_invalid(self, **kwargs):
        with self.assertRaises(ValueError):
            NlpSolverConfig(**kwargs)


if __name__ == '__main__':
    absltest.main()

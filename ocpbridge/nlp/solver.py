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

"""NLP solver adapters.

This module defines the interface between an Nlp and a solver engine and
provides a backend driving scipy.optimize.minimize. The engine owns the
iteration; the adapter only translates between the engine's calls and
the Nlp's shared decision variables:

1. The decision variables are reset to the stored initial guess.
2. Every objective/constraint callback first writes the trial point
   through Nlp.extract_optimization_vars(), then evaluates the
   collaborators, which read the same OptVector.
3. The final iterate is written back, so Nlp.get_optimization_vars()
   (and IKNLP.get_solution()) return the solver's answer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger
import numpy as np
from scipy import optimize

from ocpbridge.core.errors import ConfigurationError
from ocpbridge.core.types import NlpStatus
from ocpbridge.nlp.config import NlpSolverConfig
from ocpbridge.nlp.nlp import Nlp


_CONSTRAINED_METHODS = ('SLSQP', 'trust-constr', 'COBYLA')
_GRADIENT_FREE_METHODS = ('COBYLA',)


@dataclass
class NlpSolution:
    """Result of an NLP solve.

    Attributes:
        x: Final decision variables.
        cost: Objective value at x.
        status: Solver status.
        iterations: Number of solver iterations.
        message: Message reported by the solver engine.
        info: Engine-specific information.
    """
    x: np.ndarray
    cost: float
    status: NlpStatus = NlpStatus.UNKNOWN
    iterations: int = 0
    message: str = ''
    info: Dict[str, Any] = field(default_factory=dict)

    @property
    def converged(self) -> bool:
        return self.status == NlpStatus.SOLVED


class NlpSolver(ABC):
    """Abstract NLP solver operating on an Nlp instance."""

    name: str = "base"

    def __init__(self, nlp: Optional[Nlp] = None, config: Optional[NlpSolverConfig] = None):
        self.nlp = nlp
        self.config = config or NlpSolverConfig()

    def configure(self, config: NlpSolverConfig):
        self.config = config

    def set_problem(self, nlp: Nlp):
        self.nlp = nlp

    def solve(self) -> NlpSolution:
        """Solve the attached NLP, starting from its stored initial guess."""
        if self.nlp is None:
            raise ConfigurationError("No NLP attached to solver")
        self.nlp.update_problem()
        self.nlp.opt_variables.reset_to_initial_guess()
        return self._solve_impl(self.nlp)

    @abstractmethod
    def _solve_impl(self, nlp: Nlp) -> NlpSolution:
        ...


def _map_status(result: optimize.OptimizeResult) -> NlpStatus:
    if result.success:
        return NlpStatus.SOLVED
    message = str(result.get('message', '')).lower()
    if 'iteration' in message or 'maximum number' in message:
        return NlpStatus.MAX_ITERATIONS
    if 'infeasible' in message or 'incompatible' in message:
        return NlpStatus.INFEASIBLE
    return NlpStatus.FAILED


class ScipyNlpSolver(NlpSolver):
    """NLP solver backed by scipy.optimize.minimize.

    Example:
        >>> ik = IKNLP(cost_evaluator, lower, upper)
        >>> ik.set_initial_guess(q_init)
        >>> solution = ScipyNlpSolver(ik, NlpSolverConfig(method='SLSQP')).solve()
        >>> q = ik.get_solution()
    """

    name = "scipy"

    def _objective(self, nlp: Nlp):
        def fun(x):
            nlp.extract_optimization_vars(x)
            return nlp.evaluate_cost()

        def jac(x):
            nlp.extract_optimization_vars(x)
            return nlp.evaluate_cost_gradient()

        return fun, jac

    def _constraints(self, nlp: Nlp, use_gradient: bool) -> List[Dict[str, Any]]:
        if nlp.get_constraint_count() == 0:
            return []

        lower, upper = nlp.get_constraint_bounds()
        equality = np.isfinite(lower) & (lower == upper)
        has_lower = np.isfinite(lower) & ~equality
        has_upper = np.isfinite(upper) & ~equality

        def g(x):
            nlp.extract_optimization_vars(x)
            return nlp.evaluate_constraints()

        def dg(x):
            nlp.extract_optimization_vars(x)
            return nlp.evaluate_constraint_jacobian()

        # (type, mask, sign, offset): sign * (g(x) - offset) >= 0 or == 0
        specs = [
            ('eq', equality, 1.0, lower),
            ('ineq', has_lower, 1.0, lower),
            ('ineq', has_upper, -1.0, upper),
        ]
        constraints = []
        for kind, mask, sign, offset in specs:
            if not np.any(mask):
                continue

            def fun(x, mask=mask, sign=sign, offset=offset):
                return sign * (g(x)[mask] - offset[mask])

            constraint = {'type': kind, 'fun': fun}
            if use_gradient:
                def jac(x, mask=mask, sign=sign):
                    return sign * dg(x)[mask]
                constraint['jac'] = jac
            constraints.append(constraint)
        return constraints

    def _solve_impl(self, nlp: Nlp) -> NlpSolution:
        config = self.config
        method = config.method
        if nlp.get_constraint_count() > 0 and method not in _CONSTRAINED_METHODS:
            raise ConfigurationError(
                f"Method {method} does not support general constraints. "
                f"Use one of {list(_CONSTRAINED_METHODS)}."
            )
        use_gradient = config.use_gradient and method not in _GRADIENT_FREE_METHODS

        fun, jac = self._objective(nlp)
        x_lb, x_ub = nlp.get_variable_bounds()
        bounds = None
        if np.any(np.isfinite(x_lb)) or np.any(np.isfinite(x_ub)):
            bounds = optimize.Bounds(x_lb, x_ub)

        x0 = nlp.get_optimization_vars()
        logger.debug(
            "Solving NLP with {} ({}): {} variables, {} constraints",
            self.name, method, nlp.get_variable_count(), nlp.get_constraint_count())

        result = optimize.minimize(
            fun,
            x0,
            method=method,
            jac=jac if use_gradient else None,
            bounds=bounds,
            constraints=self._constraints(nlp, use_gradient),
            tol=config.tolerance,
            options=config.to_dict(),
        )

        # The engine's last callback need not have been at the returned point.
        nlp.extract_optimization_vars(result.x)
        status = _map_status(result)
        solution = NlpSolution(
            x=nlp.get_optimization_vars(),
            cost=nlp.evaluate_cost(),
            status=status,
            iterations=int(result.get('nit', 0)),
            message=str(result.get('message', '')),
            info={'nfev': result.get('nfev'), 'njev': result.get('njev')},
        )

        if status == NlpStatus.SOLVED:
            logger.debug(
                "NLP solved in {} iterations, cost={:.6g}",
                solution.iterations, solution.cost)
        elif status == NlpStatus.MAX_ITERATIONS:
            logger.warning(
                "NLP solver stopped after {} iterations: {}",
                solution.iterations, solution.message)
        else:
            logger.error("NLP solver failed ({}): {}", status.name, solution.message)
        return solution

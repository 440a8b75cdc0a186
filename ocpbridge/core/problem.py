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

"""Optimal control problem specification."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import jax.numpy as jnp
from jax import Array
from loguru import logger

from ocpbridge.core.constraints import BoxConstraint, ConstraintContainer
from ocpbridge.core.errors import ConfigurationError, DimensionMismatchError
from ocpbridge.core.types import ArrayLike, Time

if TYPE_CHECKING:
    from ocpbridge.costs.quadratic import CostFunctionQuadratic
    from ocpbridge.systems.config import LinearizerConfig
    from ocpbridge.systems.discrete import DiscreteControlledSystem
    from ocpbridge.systems.linear import DiscreteLinearSystem


class OptimalControlProblem:
    """Finite-horizon optimal control problem.

    Aggregates everything a trajectory optimization algorithm needs to
    know about a problem instance:

        min  sum_{n=0}^{N-1} l(x_n, u_n, n) + l_f(x_N)
        s.t. x_{n+1} = f(x_n, u_n, n),  x_0 = initial_state
             u_lb <= u_n <= u_ub          (input box constraints)
             x_lb <= x_n <= x_ub          (state box constraints)
             d_lb <= g(x_n, u_n, n) <= d_ub  (general constraints)

    The problem performs no algorithmic work. Collaborators (dynamics,
    linear system, cost function, constraints) are held by reference and
    may be replaced at any point before a solver reads them. Solvers must
    call verify() before first use; construction never verifies, so fields
    may be filled in later.

    The linear system is optional. If it is absent, get_linearized_system()
    synthesizes a finite-difference (or autodiff) linearizer, which is
    typically much slower than user-provided derivatives.

    Example:
        >>> problem = OptimalControlProblem(
        ...     dynamics=system,
        ...     cost_function=CostFunctionQuadraticSimple(Q, R),
        ...     time_horizon=50,
        ...     initial_state=jnp.array([1.0, 0.0]),
        ... )
        >>> problem.verify()
        >>> problem.time_horizon = 49  # replanning with a shrinking horizon
    """

    def __init__(
        self,
        dynamics: Optional['DiscreteControlledSystem'] = None,
        cost_function: Optional['CostFunctionQuadratic'] = None,
        linear_system: Optional['DiscreteLinearSystem'] = None,
        time_horizon: Optional[Time] = None,
        initial_state: Optional[ArrayLike] = None,
        input_box_constraints: Optional[BoxConstraint] = None,
        state_box_constraints: Optional[BoxConstraint] = None,
        general_constraints: Optional[ConstraintContainer] = None,
        linearizer_config: Optional['LinearizerConfig'] = None,
    ):
        self._dynamics = dynamics
        self._linear_system = linear_system
        self._fallback_linear_system = None
        self.cost_function = cost_function
        self._time_horizon = None
        self._initial_state = None
        self.time_horizon = time_horizon
        self.initial_state = initial_state
        self.input_box_constraints = input_box_constraints
        self.state_box_constraints = state_box_constraints
        self.general_constraints = general_constraints
        self.linearizer_config = linearizer_config

    @property
    def dynamics(self) -> Optional['DiscreteControlledSystem']:
        """The nonlinear controlled system."""
        return self._dynamics

    @dynamics.setter
    def dynamics(self, dynamics: Optional['DiscreteControlledSystem']):
        self._dynamics = dynamics
        self._fallback_linear_system = None

    @property
    def linear_system(self) -> Optional['DiscreteLinearSystem']:
        """The user-provided linearized dynamics, or None."""
        return self._linear_system

    @linear_system.setter
    def linear_system(self, linear_system: Optional['DiscreteLinearSystem']):
        self._linear_system = linear_system
        self._fallback_linear_system = None

    @property
    def time_horizon(self) -> Optional[Time]:
        return self._time_horizon

    @time_horizon.setter
    def time_horizon(self, tf: Optional[Time]):
        if tf is not None and tf < 0:
            raise ConfigurationError(f"time_horizon must be >= 0, got {tf}")
        self._time_horizon = tf

    @property
    def initial_state(self) -> Optional[Array]:
        return self._initial_state

    @initial_state.setter
    def initial_state(self, x0: Optional[ArrayLike]):
        self._initial_state = None if x0 is None else jnp.array(x0)

    @property
    def has_linear_system(self) -> bool:
        return self._linear_system is not None

    @property
    def is_constrained(self) -> bool:
        """Return True if any constraint slot is filled."""
        return (
            self.input_box_constraints is not None
            or self.state_box_constraints is not None
            or self.general_constraints is not None
        )

    def verify(self):
        """Check that all ingredients of the problem are present and consistent.

        The linear system is not required: if it is missing, derivative
        requests fall back to get_linearized_system()'s approximation.

        Raises:
            ConfigurationError: If the dynamics or the cost function is missing.
            DimensionMismatchError: If the dimensions of the ingredients disagree.
        """
        if self._dynamics is None:
            raise ConfigurationError("Dynamics not set")
        if self.cost_function is None:
            raise ConfigurationError("Cost function not set")

        n = self._dynamics.state_dim
        m = self._dynamics.control_dim

        for name, obj in (('cost function', self.cost_function),
                          ('linear system', self._linear_system)):
            if obj is None:
                continue
            dims = (getattr(obj, 'state_dim', n), getattr(obj, 'control_dim', m))
            if dims != (n, m):
                raise DimensionMismatchError(
                    f'{name} (state_dim, control_dim)', (n, m), dims)

        if self._initial_state is not None and self._initial_state.shape != (n,):
            raise DimensionMismatchError('initial state', (n,), self._initial_state.shape)

        for slot, on in (('input_box_constraints', 'input'),
                         ('state_box_constraints', 'state')):
            box = getattr(self, slot)
            if box is not None and getattr(box, 'on', on) != on:
                raise ConfigurationError(
                    f"{slot} must constrain the {on}, got a box on the {box.on}")

        if self.input_box_constraints is not None:
            if self.input_box_constraints.constraint_count != m:
                raise DimensionMismatchError(
                    'input box constraints', (m,),
                    (self.input_box_constraints.constraint_count,))
        if self.state_box_constraints is not None:
            if self.state_box_constraints.constraint_count != n:
                raise DimensionMismatchError(
                    'state box constraints', (n,),
                    (self.state_box_constraints.constraint_count,))

        logger.debug(
            "Verified optimal control problem: state_dim={}, control_dim={}, "
            "horizon={}, linear system {}, constrained={}",
            n, m, self._time_horizon,
            'provided' if self.has_linear_system else 'missing',
            self.is_constrained,
        )

    def get_linearized_system(self) -> 'DiscreteLinearSystem':
        """Return the linear system, approximating it if it was not provided.

        Raises:
            ConfigurationError: If neither a linear system nor dynamics is set.
        """
        if self._linear_system is not None:
            return self._linear_system
        if self._fallback_linear_system is None:
            if self._dynamics is None:
                raise ConfigurationError(
                    "Cannot linearize: neither linear system nor dynamics set")
            from ocpbridge.systems.linearizer import make_linearizer  # Avoid circular import
            logger.warning(
                "No linear system provided, approximating derivatives of the "
                "dynamics. This is typically slow.")
            self._fallback_linear_system = make_linearizer(
                self._dynamics, self.linearizer_config)
        return self._fallback_linear_system

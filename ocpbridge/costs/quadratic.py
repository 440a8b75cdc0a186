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

"""Quadratic cost functions for optimal control problems.

A cost function provides intermediate costs l(x, u, n) and a terminal
cost l_f(x) together with their first and second derivatives, which
gradient-based trajectory optimizers use to build a local quadratic
model:

    J = sum_{n=0}^{T-1} l(x_n, u_n, n) + l_f(x_T)
"""

from abc import ABC, abstractmethod
import copy
from typing import Optional

import jax
import jax.numpy as jnp
from jax import Array

from ocpbridge.core.errors import DimensionMismatchError
from ocpbridge.core.types import ArrayLike


class CostFunctionQuadratic(ABC):
    """Abstract cost function with quadratic local models.

    Subclasses implement evaluate_intermediate() and evaluate_terminal().
    Derivatives default to JAX automatic differentiation and may be
    overridden with analytic expressions.

    Attributes:
        state_dim: Dimension of the state vector (n).
        control_dim: Dimension of the control vector (m).
    """

    def __init__(self, state_dim: int, control_dim: int):
        self.state_dim = int(state_dim)
        self.control_dim = int(control_dim)

    @abstractmethod
    def evaluate_intermediate(self, x: Array, u: Array, n: int) -> Array:
        ...

    @abstractmethod
    def evaluate_terminal(self, x: Array) -> Array:
        ...

    def state_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        return jax.grad(self.evaluate_intermediate, argnums=0)(x, u, n)

    def control_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        return jax.grad(self.evaluate_intermediate, argnums=1)(x, u, n)

    def state_second_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        return jax.hessian(self.evaluate_intermediate, argnums=0)(x, u, n)

    def control_second_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        return jax.hessian(self.evaluate_intermediate, argnums=1)(x, u, n)

    def state_control_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        """Mixed derivative d2l/dudx of shape (m, n)."""
        grad_x = jax.grad(self.evaluate_intermediate, argnums=0)
        return jax.jacobian(grad_x, argnums=1)(x, u, n).T

    def state_derivative_terminal(self, x: Array) -> Array:
        return jax.grad(self.evaluate_terminal)(x)

    def state_second_derivative_terminal(self, x: Array) -> Array:
        return jax.hessian(self.evaluate_terminal)(x)

    def evaluate_trajectory(self, X: ArrayLike, U: ArrayLike) -> Array:
        """Evaluate total cost along a trajectory.

        Args:
            X: State trajectory of shape (T+1, n).
            U: Control trajectory of shape (T, m).

        Returns:
            Total cost (scalar).
        """
        X = jnp.asarray(X)
        U = jnp.asarray(U)
        if X.ndim != 2 or X.shape[1] != self.state_dim:
            raise DimensionMismatchError('state trajectory', ('T+1', self.state_dim), X.shape)
        if U.ndim != 2 or U.shape[1] != self.control_dim or U.shape[0] + 1 != X.shape[0]:
            raise DimensionMismatchError(
                'control trajectory', (X.shape[0] - 1, self.control_dim), U.shape)

        stage = jax.vmap(self.evaluate_intermediate)(X[:-1], U, jnp.arange(U.shape[0]))
        return jnp.sum(stage) + self.evaluate_terminal(X[-1])

    def clone(self) -> 'CostFunctionQuadratic':
        return copy.copy(self)


class CostFunctionQuadraticSimple(CostFunctionQuadratic):
    """Quadratic tracking cost about nominal state and control.

        l(x, u, n) = 0.5 * (x - x_nom)' Q (x - x_nom) + 0.5 * (u - u_nom)' R (u - u_nom)
        l_f(x)     = 0.5 * (x - x_final)' Q_final (x - x_final)

    Example:
        >>> cost = CostFunctionQuadraticSimple(
        ...     Q=jnp.eye(2), R=0.1 * jnp.eye(1), Q_final=10.0 * jnp.eye(2))
        >>> cost.evaluate_intermediate(x, u, 0)
    """

    def __init__(
        self,
        Q: ArrayLike,
        R: ArrayLike,
        x_nominal: Optional[ArrayLike] = None,
        u_nominal: Optional[ArrayLike] = None,
        Q_final: Optional[ArrayLike] = None,
        x_final: Optional[ArrayLike] = None,
    ):
        Q = jnp.asarray(Q)
        R = jnp.asarray(R)
        if Q.ndim != 2 or Q.shape[0] != Q.shape[1]:
            raise DimensionMismatchError('Q matrix', '(n, n)', Q.shape)
        if R.ndim != 2 or R.shape[0] != R.shape[1]:
            raise DimensionMismatchError('R matrix', '(m, m)', R.shape)
        super().__init__(Q.shape[0], R.shape[0])

        self.Q = Q
        self.R = R
        self.Q_final = Q if Q_final is None else jnp.asarray(Q_final)
        if self.Q_final.shape != Q.shape:
            raise DimensionMismatchError('Q_final matrix', Q.shape, self.Q_final.shape)
        self.set_reference(x_nominal, u_nominal, x_final)

    def set_reference(
        self,
        x_nominal: Optional[ArrayLike] = None,
        u_nominal: Optional[ArrayLike] = None,
        x_final: Optional[ArrayLike] = None,
    ):
        """Update the nominal state, nominal control and final state."""
        n, m = self.state_dim, self.control_dim
        x_nominal = jnp.zeros(n) if x_nominal is None else jnp.asarray(x_nominal)
        u_nominal = jnp.zeros(m) if u_nominal is None else jnp.asarray(u_nominal)
        x_final = x_nominal if x_final is None else jnp.asarray(x_final)
        if x_nominal.shape != (n,):
            raise DimensionMismatchError('nominal state', (n,), x_nominal.shape)
        if u_nominal.shape != (m,):
            raise DimensionMismatchError('nominal control', (m,), u_nominal.shape)
        if x_final.shape != (n,):
            raise DimensionMismatchError('final state', (n,), x_final.shape)
        self.x_nominal = x_nominal
        self.u_nominal = u_nominal
        self.x_final = x_final

    def evaluate_intermediate(self, x: Array, u: Array, n: int) -> Array:
        dx = x - self.x_nominal
        du = u - self.u_nominal
        return 0.5 * (dx @ self.Q @ dx + du @ self.R @ du)

    def evaluate_terminal(self, x: Array) -> Array:
        dx = x - self.x_final
        return 0.5 * dx @ self.Q_final @ dx

    def state_second_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        return 0.5 * (self.Q + self.Q.T)

    def control_second_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        return 0.5 * (self.R + self.R.T)

    def state_control_derivative_intermediate(self, x: Array, u: Array, n: int) -> Array:
        return jnp.zeros((self.control_dim, self.state_dim))

    def state_second_derivative_terminal(self, x: Array) -> Array:
        return 0.5 * (self.Q_final + self.Q_final.T)

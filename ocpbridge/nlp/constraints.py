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

"""Constraint containers for nonlinear programs.

A constraint container reads the shared OptVector and provides

- bounds on the decision variables,  x_lb <= x <= x_ub, and
- general constraints,               g_lb <= g(x) <= g_ub.

Either part may be trivial: infinite variable bounds, or zero general
constraints.
"""

from abc import ABC, abstractmethod

import jax
import jax.numpy as jnp
from jax import Array
import numpy as np

from ocpbridge.core.constraints import validate_bounds
from ocpbridge.core.errors import check_dimension
from ocpbridge.core.types import ArrayLike, Bounds
from ocpbridge.nlp.opt_vector import OptVector


class DiscreteConstraintContainer(ABC):
    """Abstract constraint container bound to a shared OptVector."""

    def __init__(self, opt_vector: OptVector):
        self._opt_vector = opt_vector

    @property
    def opt_vector(self) -> OptVector:
        return self._opt_vector

    @property
    @abstractmethod
    def constraint_count(self) -> int:
        """Number of general constraints."""
        ...

    @abstractmethod
    def constraints(self, x: Array) -> Array:
        """General constraint values g(x) of shape (constraint_count,)."""
        ...

    @abstractmethod
    def get_constraint_bounds(self) -> Bounds:
        ...

    def constraint_jacobian(self, x: Array) -> Array:
        return jax.jacfwd(self.constraints)(x)

    def get_variable_bounds(self) -> Bounds:
        """Bounds on the decision variables. Unbounded by default."""
        inf = np.full(self._opt_vector.size, np.inf)
        return -inf, inf

    def evaluate_constraints(self) -> np.ndarray:
        x = jnp.asarray(self._opt_vector.get_optimization_vars())
        return np.asarray(self.constraints(x), dtype=np.float64)

    def evaluate_jacobian(self) -> np.ndarray:
        x = jnp.asarray(self._opt_vector.get_optimization_vars())
        return np.asarray(self.constraint_jacobian(x), dtype=np.float64).reshape(
            self.constraint_count, self._opt_vector.size)

    def evaluate_violation(self) -> float:
        """Largest violation of variable bounds and constraint bounds."""
        x = self._opt_vector.get_optimization_vars()
        x_lb, x_ub = self.get_variable_bounds()
        violations = [np.maximum(0.0, x_lb - x), np.maximum(0.0, x - x_ub)]
        if self.constraint_count > 0:
            g = self.evaluate_constraints()
            g_lb, g_ub = self.get_constraint_bounds()
            violations += [np.maximum(0.0, g_lb - g), np.maximum(0.0, g - g_ub)]
        return float(np.max(np.concatenate(violations)))


class BoxConstraintContainer(DiscreteConstraintContainer):
    """Per-variable bounds lower <= x <= upper, with no general constraints.

    The bounds are validated and frozen at construction.

    Raises:
        DimensionMismatchError: If a bound's length differs from the
            number of decision variables.
        InvalidBoundsError: If lower[i] > upper[i] for any i.
    """

    def __init__(self, opt_vector: OptVector, lower: ArrayLike, upper: ArrayLike):
        super().__init__(opt_vector)
        self._lower, self._upper = validate_bounds(
            lower, upper, dim=opt_vector.size, what='decision variable bounds')

    @property
    def constraint_count(self) -> int:
        return 0

    def constraints(self, x: Array) -> Array:
        return jnp.zeros(0)

    def get_constraint_bounds(self) -> Bounds:
        return np.zeros(0), np.zeros(0)

    def get_variable_bounds(self) -> Bounds:
        return self._lower, self._upper


class FunctionConstraintContainer(DiscreteConstraintContainer):
    """General constraints lower <= fn(x) <= upper, optionally with variable bounds.

    Example:
        >>> # stay inside the unit disk
        >>> container = FunctionConstraintContainer(
        ...     opt_vector, lambda x: jnp.array([x @ x]), [-jnp.inf], [1.0])
    """

    def __init__(
        self,
        opt_vector: OptVector,
        fn,
        lower: ArrayLike,
        upper: ArrayLike,
        variable_lower: ArrayLike = None,
        variable_upper: ArrayLike = None,
    ):
        super().__init__(opt_vector)
        self.fn = fn
        self._lower, self._upper = validate_bounds(
            lower, upper, what='constraint bounds')
        if variable_lower is None and variable_upper is None:
            self._variable_bounds = super().get_variable_bounds()
        else:
            inf = np.full(opt_vector.size, np.inf)
            self._variable_bounds = validate_bounds(
                -inf if variable_lower is None else variable_lower,
                inf if variable_upper is None else variable_upper,
                dim=opt_vector.size, what='decision variable bounds')

    @property
    def constraint_count(self) -> int:
        return self._lower.shape[0]

    def constraints(self, x: Array) -> Array:
        g = jnp.atleast_1d(self.fn(x))
        return check_dimension('constraint value', g, self.constraint_count)

    def get_constraint_bounds(self) -> Bounds:
        return self._lower, self._upper

    def get_variable_bounds(self) -> Bounds:
        return self._variable_bounds

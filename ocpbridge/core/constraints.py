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

"""Constraint containers for optimal control problems.

A constraint container evaluates g(x, u, n) and carries the bounds
lb <= g(x, u, n) <= ub. Two variants are provided:

- BoxConstraint: per-element bounds on either the control or the state.
- GeneralConstraint: bounds on an arbitrary function of (x, u, n).

An OptimalControlProblem holds up to one container per slot (input box,
state box, general); an empty slot means the problem is unconstrained in
that respect.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from typing import Literal, Optional

import jax.numpy as jnp
from jax import Array
import numpy as np

from ocpbridge.core.errors import DimensionMismatchError, InvalidBoundsError
from ocpbridge.core.types import ArrayLike, Bounds, ConstraintFn


def validate_bounds(
    lower: ArrayLike,
    upper: ArrayLike,
    dim: Optional[int] = None,
    what: str = 'bounds',
) -> Bounds:
    """Check a (lower, upper) pair and return it as float numpy vectors.

    Args:
        lower: Lower bound vector.
        upper: Upper bound vector.
        dim: Expected length. If None, only lower and upper must agree.
        what: Name used in error messages.

    Returns:
        Tuple (lower, upper) of 1-D float64 arrays, copied from the inputs.

    Raises:
        DimensionMismatchError: If a bound is not 1-D or has the wrong length.
        InvalidBoundsError: If lower[i] > upper[i] for any i.
    """
    lower = np.array(lower, dtype=np.float64)
    upper = np.array(upper, dtype=np.float64)
    if lower.ndim != 1:
        raise DimensionMismatchError(f'{what} (lower)', '1-D vector', lower.shape)
    if upper.ndim != 1:
        raise DimensionMismatchError(f'{what} (upper)', '1-D vector', upper.shape)

    expected = lower.shape[0] if dim is None else dim
    if lower.shape[0] != expected:
        raise DimensionMismatchError(f'{what} (lower)', (expected,), lower.shape)
    if upper.shape[0] != expected:
        raise DimensionMismatchError(f'{what} (upper)', (expected,), upper.shape)

    bad = np.nonzero(lower > upper)[0]
    if bad.size > 0:
        raise InvalidBoundsError(bad, lower, upper)

    lower.setflags(write=False)
    upper.setflags(write=False)
    return lower, upper


class ConstraintContainer(ABC):
    """Abstract container for constraints lb <= g(x, u, n) <= ub."""

    @property
    @abstractmethod
    def constraint_count(self) -> int:
        """Number of scalar constraints."""
        ...

    @property
    @abstractmethod
    def lower_bound(self) -> np.ndarray:
        ...

    @property
    @abstractmethod
    def upper_bound(self) -> np.ndarray:
        ...

    @abstractmethod
    def evaluate(self, x: Array, u: Array, n: int) -> Array:
        """Evaluate g(x, u, n) of shape (constraint_count,)."""
        ...

    def violation(self, x: Array, u: Array, n: int) -> Array:
        """Return the largest bound violation at (x, u, n), 0 if feasible."""
        g = self.evaluate(x, u, n)
        below = jnp.maximum(0.0, self.lower_bound - g)
        above = jnp.maximum(0.0, g - self.upper_bound)
        return jnp.max(jnp.concatenate([below, above, jnp.zeros(1)]))

    def is_satisfied(self, x: Array, u: Array, n: int, tol: float = 1e-9) -> bool:
        return bool(self.violation(x, u, n) <= tol)

    def clone(self) -> 'ConstraintContainer':
        # Bounds are read-only arrays, so a shallow copy is independent.
        return copy.copy(self)


class BoxConstraint(ConstraintContainer):
    """Per-element bounds on the control input or on the state.

    Example:
        >>> input_box = BoxConstraint([-1.0], [1.0], on='input')
        >>> input_box.evaluate(x, jnp.array([2.0]), 0)
        Array([2.], dtype=float64)
    """

    def __init__(
        self,
        lower: ArrayLike,
        upper: ArrayLike,
        on: Literal['input', 'state'] = 'input',
    ):
        if on not in ('input', 'state'):
            raise ValueError(f"on must be 'input' or 'state', got {on!r}")
        self.on = on
        self._lower, self._upper = validate_bounds(
            lower, upper, what=f'{on} box constraint')

    @property
    def constraint_count(self) -> int:
        return self._lower.shape[0]

    @property
    def lower_bound(self) -> np.ndarray:
        return self._lower

    @property
    def upper_bound(self) -> np.ndarray:
        return self._upper

    def evaluate(self, x: Array, u: Array, n: int) -> Array:
        z = u if self.on == 'input' else x
        z = jnp.asarray(z)
        if z.shape != (self.constraint_count,):
            raise DimensionMismatchError(
                f'{self.on} box constraint', (self.constraint_count,), z.shape)
        return z


class GeneralConstraint(ConstraintContainer):
    """Bounds on an arbitrary function lb <= fn(x, u, n) <= ub.

    For an equality constraint pass identical lower and upper bounds.
    """

    def __init__(self, fn: ConstraintFn, lower: ArrayLike, upper: ArrayLike):
        self.fn = fn
        self._lower, self._upper = validate_bounds(
            lower, upper, what='general constraint')

    @property
    def constraint_count(self) -> int:
        return self._lower.shape[0]

    @property
    def lower_bound(self) -> np.ndarray:
        return self._lower

    @property
    def upper_bound(self) -> np.ndarray:
        return self._upper

    def evaluate(self, x: Array, u: Array, n: int) -> Array:
        g = jnp.atleast_1d(jnp.asarray(self.fn(x, u, n)))
        if g.shape != (self.constraint_count,):
            raise DimensionMismatchError(
                'general constraint value', (self.constraint_count,), g.shape)
        return g

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

"""Linear(ized) discrete-time systems.

A linear system provides the Jacobians of a transition function,

    A_n = df/dx (x_n, u_n, n),    B_n = df/du (x_n, u_n, n),

which gradient-based trajectory optimizers consume. It is itself a
controlled system, propagating the affine model A x + B u.
"""

from abc import abstractmethod
from typing import Optional

import jax.numpy as jnp
from jax import Array

from ocpbridge.control.base import DiscreteController
from ocpbridge.core.errors import DimensionMismatchError
from ocpbridge.core.types import ArrayLike, Jacobians, SystemType
from ocpbridge.systems.discrete import DiscreteControlledSystem


class DiscreteLinearSystem(DiscreteControlledSystem):
    """Abstract system that exposes the derivatives of its dynamics."""

    @abstractmethod
    def get_derivatives(self, x: ArrayLike, u: ArrayLike, n: int = 0) -> Jacobians:
        """Return (A, B) with shapes (n, n) and (n, m)."""
        ...

    def get_derivative_state(self, x: ArrayLike, u: ArrayLike, n: int = 0) -> Array:
        return self.get_derivatives(x, u, n)[0]

    def get_derivative_control(self, x: ArrayLike, u: ArrayLike, n: int = 0) -> Array:
        return self.get_derivatives(x, u, n)[1]


class LinearTimeInvariantSystem(DiscreteLinearSystem):
    """x_{n+1} = A x_n + B u_n with constant A and B."""

    def __init__(
        self,
        A: ArrayLike,
        B: ArrayLike,
        controller: Optional[DiscreteController] = None,
        system_type: SystemType = SystemType.GENERAL,
    ):
        A = jnp.asarray(A)
        B = jnp.asarray(B)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise DimensionMismatchError('A matrix', '(n, n)', A.shape)
        if B.ndim != 2 or B.shape[0] != A.shape[0]:
            raise DimensionMismatchError('B matrix', (A.shape[0], 'm'), B.shape)
        self.A = A
        self.B = B
        super().__init__(A.shape[0], B.shape[1], controller, system_type)

    def _propagate_controlled_impl(self, state: Array, control: Array, n: int) -> Array:
        return self.A @ state + self.B @ control

    def get_derivatives(self, x: ArrayLike, u: ArrayLike, n: int = 0) -> Jacobians:
        return self.A, self.B

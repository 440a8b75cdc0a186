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

"""Base class for discrete-time controllers.

A controller maps a state and a time index to a control input,
u_n = g(x_n, n). Controllers are attached to a DiscreteControlledSystem,
which queries them on every call to propagate().

Every controller must be cloneable: trajectory optimization algorithms
fork simulation branches by cloning systems, and a cloned system owns an
independent copy of its controller.
"""

from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array


class DiscreteController(ABC):
    """Abstract discrete-time controller u = g(x, n).

    Attributes:
        control_dim: Dimension of the control input (m).
    """

    def __init__(self, control_dim: int):
        if control_dim < 1:
            raise ValueError(f"control_dim must be >= 1, got {control_dim}")
        self.control_dim = int(control_dim)

    @abstractmethod
    def compute_control(self, state: Array, n: int) -> Array:
        """Compute the control input for a given state and time index.

        Args:
            state: Current state (n,).
            n: Current time index.

        Returns:
            Control input of shape (control_dim,).
        """
        ...

    @abstractmethod
    def clone(self) -> 'DiscreteController':
        """Return a deep copy with independent ownership of all parameters."""
        ...

    def get_derivative_u0(self, state: Array, n: int) -> Array:
        """Derivative of the control with respect to its feedforward part.

        Returns the identity by default, shape (control_dim, control_dim).
        """
        return jnp.eye(self.control_dim)

    def __call__(self, state: Array, n: int) -> Array:
        return self.compute_control(state, n)

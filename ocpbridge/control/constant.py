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

"""Constant (state and time invariant) controller."""

from typing import Optional

import jax.numpy as jnp
from jax import Array

from ocpbridge.control.base import DiscreteController
from ocpbridge.core.errors import DimensionMismatchError, check_dimension
from ocpbridge.core.types import ArrayLike


class ConstantController(DiscreteController):
    """Controller that always returns the same control input.

    Useful to forward simulate a controlled system subject to a fixed
    input, for example when perturbing the dynamics for numerical
    linearization, or as a neutral default.

    Example:
        >>> controller = ConstantController(control_dim=2)  # zero control
        >>> controller.set_control(jnp.array([1.0, -1.0]))
        >>> controller.compute_control(x, 7)
        Array([ 1., -1.], dtype=float64)
    """

    def __init__(
        self,
        control_dim: Optional[int] = None,
        u: Optional[ArrayLike] = None,
    ):
        """Initialize with a fixed control, or with zeros of control_dim.

        Args:
            control_dim: Control dimension. Inferred from u if not given.
            u: The fixed control signal. Defaults to zeros.
        """
        if u is None:
            if control_dim is None:
                raise ValueError("Either control_dim or u must be provided")
            u = jnp.zeros(control_dim)
        u = jnp.asarray(u)
        if control_dim is None:
            if u.ndim != 1:
                raise DimensionMismatchError('constant control', '(m,)', u.shape)
            control_dim = u.shape[0]
        super().__init__(control_dim)
        self._u = check_dimension('constant control', u, self.control_dim)

    def compute_control(self, state: Array, n: int) -> Array:
        # state and n are ignored
        return self._u

    def clone(self) -> 'ConstantController':
        return ConstantController(self.control_dim, jnp.array(self._u))

    def set_control(self, u: ArrayLike):
        self._u = check_dimension('constant control', jnp.asarray(u), self.control_dim)

    def get_control(self) -> Array:
        return self._u

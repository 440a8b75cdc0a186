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

"""Affine state feedback controller."""

from typing import Optional

import jax.numpy as jnp
from jax import Array

from ocpbridge.control.base import DiscreteController
from ocpbridge.core.errors import DimensionMismatchError
from ocpbridge.core.types import ArrayLike


def _at(A: Array, n: int, time_varying: bool) -> Array:
    """Index a (possibly) time-varying array, holding the last entry."""
    if not time_varying:
        return A
    return A[min(max(n, 0), A.shape[0] - 1)]


class StateFeedbackController(DiscreteController):
    """Affine feedback law u_n = u_ff[n] + K[n] (x_n - x_ref[n]).

    Each of u_ff, x_ref and K may be time invariant or given per time
    index. Past the end of a time-varying array the last entry is held.

    Attributes:
        u_ff: Feedforward control, shape (m,) or (T, m).
        K: Feedback gain, shape (m, n) or (T, m, n).
        x_ref: Reference state, shape (n,) or (T, n). Defaults to zeros.
    """

    def __init__(
        self,
        u_ff: ArrayLike,
        K: ArrayLike,
        x_ref: Optional[ArrayLike] = None,
    ):
        u_ff = jnp.asarray(u_ff)
        K = jnp.asarray(K)
        if u_ff.ndim not in (1, 2):
            raise DimensionMismatchError('feedforward control', '(m,) or (T, m)', u_ff.shape)
        if K.ndim not in (2, 3):
            raise DimensionMismatchError('feedback gain', '(m, n) or (T, m, n)', K.shape)

        control_dim = u_ff.shape[-1]
        state_dim = K.shape[-1]
        if K.shape[-2] != control_dim:
            raise DimensionMismatchError('feedback gain rows', control_dim, K.shape[-2])
        super().__init__(control_dim)
        self.state_dim = state_dim

        if x_ref is None:
            x_ref = jnp.zeros(state_dim)
        x_ref = jnp.asarray(x_ref)
        if x_ref.ndim not in (1, 2) or x_ref.shape[-1] != state_dim:
            raise DimensionMismatchError('reference state', (state_dim,), x_ref.shape)

        self.u_ff = u_ff
        self.K = K
        self.x_ref = x_ref

    def compute_control(self, state: Array, n: int) -> Array:
        u_ff = _at(self.u_ff, n, self.u_ff.ndim == 2)
        K = _at(self.K, n, self.K.ndim == 3)
        x_ref = _at(self.x_ref, n, self.x_ref.ndim == 2)
        return u_ff + K @ (jnp.asarray(state) - x_ref)

    def clone(self) -> 'StateFeedbackController':
        return StateFeedbackController(
            jnp.array(self.u_ff), jnp.array(self.K), jnp.array(self.x_ref))

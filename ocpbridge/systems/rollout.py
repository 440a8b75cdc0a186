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

"""Simulation of discrete-time controlled systems.

These are the unit operations used by shooting-type algorithms: a
closed-loop rollout under the system's own controller, and an open-loop
rollout of a given control sequence.
"""

import jax.numpy as jnp
from jax import Array

from ocpbridge.core.errors import DimensionMismatchError
from ocpbridge.core.types import ArrayLike
from ocpbridge.systems.discrete import DiscreteControlledSystem


def rollout(
    system: DiscreteControlledSystem,
    x0: ArrayLike,
    num_steps: int,
    n0: int = 0,
) -> Array:
    """Closed-loop rollout: x[k+1] = system.propagate(x[k], n0 + k).

    Args:
        system: Controlled system. Propagated with zero control if it
            holds no controller.
        x0: Initial state of shape (n,).
        num_steps: Number of steps T.
        n0: Time index of the initial state.

    Returns:
        X: State trajectory of shape (T+1, n).
    """
    if num_steps < 0:
        raise ValueError(f"num_steps must be >= 0, got {num_steps}")
    X = [jnp.asarray(x0)]
    for k in range(num_steps):
        X.append(system.propagate(X[-1], n0 + k))
    return jnp.stack(X)


def rollout_controls(
    system: DiscreteControlledSystem,
    x0: ArrayLike,
    U: ArrayLike,
    n0: int = 0,
) -> Array:
    """Open-loop rollout: x[k+1] = system.propagate_controlled(x[k], U[k], n0 + k).

    The system's controller, if any, is ignored.

    Args:
        system: Controlled system.
        x0: Initial state of shape (n,).
        U: Control sequence of shape (T, m).
        n0: Time index of the initial state.

    Returns:
        X: State trajectory of shape (T+1, n).
    """
    U = jnp.asarray(U)
    if U.ndim != 2 or U.shape[1] != system.control_dim:
        raise DimensionMismatchError(
            'control sequence', ('T', system.control_dim), U.shape)
    X = [jnp.asarray(x0)]
    for k in range(U.shape[0]):
        X.append(system.propagate_controlled(X[-1], U[k], n0 + k))
    return jnp.stack(X)

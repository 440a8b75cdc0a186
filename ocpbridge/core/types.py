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

"""Type definitions for optimal control problems and NLP bridges."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Protocol, Tuple, Union

from jax import Array
import numpy as np


# Type aliases for common shapes
# State: (n,) array
# Control: (m,) array
# Joint configuration: (n_joints,) array
# StateTrajectory: (T+1, n) array
# ControlTrajectory: (T, m) array

PyTree = Any

ArrayLike = Union[Array, np.ndarray]

# Discrete time index n, or continuous time t
Time = Union[int, float]


class SystemType(Enum):
    """Structural tag carried by every controlled system."""
    GENERAL = auto()
    SECOND_ORDER = auto()


class NlpStatus(Enum):
    """Status codes reported by NLP solver adapters."""
    SOLVED = auto()           # Converged to solution
    MAX_ITERATIONS = auto()   # Reached maximum iterations
    INFEASIBLE = auto()       # Constraints could not be satisfied
    FAILED = auto()           # Solver reported a failure
    UNKNOWN = auto()          # Unknown status


# Function type protocols

class DynamicsFn(Protocol):
    """Protocol for discrete-time dynamics functions.

    Signature: dynamics(x, u, n, params) -> x_next

    Args:
        x: State vector (n,)
        u: Control vector (m,)
        n: Time index (scalar int)
        params: Optional parameters (PyTree)

    Returns:
        x_next: Next state vector (n,)
    """
    def __call__(
        self,
        x: Array,
        u: Array,
        n: int,
        params: PyTree = ()
    ) -> Array:
        ...


class ConstraintFn(Protocol):
    """Protocol for general path constraint functions.

    Signature: constraint(x, u, n) -> constraint_values

    The constraint is satisfied when lb <= constraint(x, u, n) <= ub.
    """
    def __call__(self, x: Array, u: Array, n: int) -> Array:
        ...


class ForwardKinematicsFn(Protocol):
    """Protocol for forward kinematics functions.

    Signature: fk(q) -> p

    Args:
        q: Joint configuration (n_joints,)

    Returns:
        p: End-effector position or task-space coordinates (k,)
    """
    def __call__(self, q: Array) -> Array:
        ...


# Linearization type: (A, B) = (df/dx, df/du)
Jacobians = Tuple[Array, Array]

# Bounds type
Bounds = Tuple[np.ndarray, np.ndarray]  # (lower, upper)

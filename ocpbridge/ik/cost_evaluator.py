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

"""Cost evaluator for inverse kinematics."""

from typing import Optional

import jax.numpy as jnp
from jax import Array

from ocpbridge.core.errors import DimensionMismatchError
from ocpbridge.core.types import ArrayLike, ForwardKinematicsFn
from ocpbridge.nlp.cost_evaluator import DiscreteCostEvaluator


class IKCostEvaluator(DiscreteCostEvaluator):
    """Weighted squared task-space error of the end effector.

        f(q) = 0.5 * (fk(q) - p*)' W (fk(q) - p*)
               + 0.5 * w_reg * ||q - q_nominal||^2

    The joint regularization term is off unless regularization > 0.

    Attributes:
        kinematics: Forward kinematics q -> p.
        n_joints: Number of joints, i.e. the number of decision variables.
        target: Target task-space position p*.
        weights: Task-space weight matrix W.
    """

    def __init__(
        self,
        kinematics: ForwardKinematicsFn,
        n_joints: int,
        target: ArrayLike,
        weights: Optional[ArrayLike] = None,
        regularization: float = 0.0,
        q_nominal: Optional[ArrayLike] = None,
    ):
        super().__init__()
        if n_joints < 1:
            raise ValueError(f"n_joints must be >= 1, got {n_joints}")
        self.kinematics = kinematics
        self.n_joints = int(n_joints)
        self.regularization = float(regularization)
        self.q_nominal = (jnp.zeros(self.n_joints) if q_nominal is None
                          else jnp.asarray(q_nominal))
        if self.q_nominal.shape != (self.n_joints,):
            raise DimensionMismatchError('nominal joint configuration',
                                         (self.n_joints,), self.q_nominal.shape)
        self.set_target(target, weights)

    def set_target(self, target: ArrayLike, weights: Optional[ArrayLike] = None):
        """Set the task-space target and, optionally, its weights.

        Weights may be a vector (diagonal) or a square matrix. If omitted,
        the previous weights are kept, or the identity on first call.
        """
        target = jnp.atleast_1d(jnp.asarray(target))
        k = target.shape[0]
        if weights is None:
            weights = getattr(self, 'weights', jnp.eye(k))
        weights = jnp.asarray(weights)
        if weights.ndim == 1:
            weights = jnp.diag(weights)
        if weights.shape != (k, k):
            raise DimensionMismatchError('task-space weights', (k, k), weights.shape)
        self.target = target
        self.weights = weights

    def cost(self, x: Array) -> Array:
        e = self.kinematics(x) - self.target
        value = 0.5 * e @ self.weights @ e
        if self.regularization > 0.0:
            dq = x - self.q_nominal
            value = value + 0.5 * self.regularization * dq @ dq
        return value

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

"""Reference forward kinematics for inverse kinematics problems.

IK cost evaluators accept any ForwardKinematicsFn q -> p. PlanarSerialChain
is a minimal JAX-traceable provider for planar arms with revolute joints.
"""

from typing import Sequence

import jax.numpy as jnp
from jax import Array

from ocpbridge.core.errors import check_dimension


class PlanarSerialChain:
    """Planar serial chain of revolute joints.

    Joint i rotates link i relative to link i-1; the end-effector position
    is the tip of the last link:

        p = sum_i l_i [cos(q_1 + ... + q_i), sin(q_1 + ... + q_i)]

    Attributes:
        link_lengths: Length of each link, shape (n_joints,).
    """

    def __init__(self, link_lengths: Sequence[float]):
        self.link_lengths = jnp.asarray(link_lengths, dtype=float)
        if self.link_lengths.ndim != 1 or self.link_lengths.shape[0] < 1:
            raise ValueError(
                f"link_lengths must be a non-empty vector, got shape {self.link_lengths.shape}")

    @property
    def n_joints(self) -> int:
        return self.link_lengths.shape[0]

    @property
    def reach(self) -> float:
        return float(jnp.sum(jnp.abs(self.link_lengths)))

    def __call__(self, q: Array) -> Array:
        q = check_dimension('joint configuration', jnp.asarray(q), self.n_joints)
        angles = jnp.cumsum(q)
        return jnp.array([
            jnp.sum(self.link_lengths * jnp.cos(angles)),
            jnp.sum(self.link_lengths * jnp.sin(angles)),
        ])

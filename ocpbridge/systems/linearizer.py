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

"""Linearization of nonlinear controlled systems.

Two linearizers wrap an arbitrary DiscreteControlledSystem and expose its
Jacobians through the DiscreteLinearSystem interface:

- AutoDiffLinearizer: exact Jacobians via JAX forward-mode differentiation.
  Requires the wrapped dynamics to be traceable by JAX.
- NumDiffLinearizer: finite differences. The wrapped system is cloned and
  driven by a ConstantController holding the (perturbed) control, so any
  dynamics provider works, at the price of 2(n + m) system evaluations.
"""

from typing import Optional

import jax
import jax.numpy as jnp
from jax import Array
from loguru import logger
import numpy as np

from ocpbridge.control.constant import ConstantController
from ocpbridge.core.errors import check_dimension
from ocpbridge.core.types import ArrayLike, Jacobians
from ocpbridge.systems.config import LinearizerConfig
from ocpbridge.systems.discrete import DiscreteControlledSystem
from ocpbridge.systems.linear import DiscreteLinearSystem


class AutoDiffLinearizer(DiscreteLinearSystem):
    """Linearizes a system with jax.jacfwd through propagate_controlled()."""

    def __init__(self, system: DiscreteControlledSystem):
        super().__init__(system.state_dim, system.control_dim,
                         system_type=system.system_type)
        self.system = system

    def _propagate_controlled_impl(self, state: Array, control: Array, n: int) -> Array:
        return self.system.propagate_controlled(state, control, n)

    def get_derivatives(self, x: ArrayLike, u: ArrayLike, n: int = 0) -> Jacobians:
        x = check_dimension('state', jnp.asarray(x), self.state_dim)
        u = check_dimension('control', jnp.asarray(u), self.control_dim)

        def f(x, u):
            return self.system.propagate_controlled(x, u, n)

        return jax.jacfwd(f, argnums=(0, 1))(x, u)

    def clone(self) -> 'AutoDiffLinearizer':
        new = super().clone()
        new.system = self.system.clone()
        return new


class NumDiffLinearizer(DiscreteLinearSystem):
    """Linearizes a system by finite differences.

    The step for component i is eps * max(|z_i|, 1).
    """

    def __init__(
        self,
        system: DiscreteControlledSystem,
        eps: Optional[float] = None,
        double_sided: bool = True,
    ):
        super().__init__(system.state_dim, system.control_dim,
                         system_type=system.system_type)
        self.system = system
        self.eps = eps
        self.double_sided = double_sided

    def _propagate_controlled_impl(self, state: Array, control: Array, n: int) -> Array:
        return self.system.propagate_controlled(state, control, n)

    def get_derivatives(self, x: ArrayLike, u: ArrayLike, n: int = 0) -> Jacobians:
        x = check_dimension('state', jnp.asarray(x), self.state_dim)
        u = check_dimension('control', jnp.asarray(u), self.control_dim)
        eps = self.eps
        if eps is None:
            eps = float(np.sqrt(jnp.finfo(jnp.promote_types(x.dtype, jnp.float32)).eps))
        x = np.array(x, dtype=np.float64)
        u = np.array(u, dtype=np.float64)

        # Forward simulate a private copy so the wrapped system's own
        # controller is left untouched.
        controller = ConstantController(self.control_dim, u)
        sim = self.system.clone()
        sim.set_controller(controller)

        def step(x_eval, u_eval):
            controller.set_control(u_eval)
            return np.asarray(sim.propagate(x_eval, n), dtype=np.float64)

        f0 = None if self.double_sided else step(x, u)

        def column(z, i, evaluate):
            h = eps * max(abs(z[i]), 1.0)
            z_plus = z.copy()
            z_plus[i] += h
            if self.double_sided:
                z_minus = z.copy()
                z_minus[i] -= h
                return (evaluate(z_plus) - evaluate(z_minus)) / (2.0 * h)
            return (evaluate(z_plus) - f0) / h

        A = np.stack(
            [column(x, i, lambda z: step(z, u)) for i in range(self.state_dim)],
            axis=1)
        B = np.stack(
            [column(u, j, lambda z: step(x, z)) for j in range(self.control_dim)],
            axis=1)
        return jnp.asarray(A), jnp.asarray(B)

    def clone(self) -> 'NumDiffLinearizer':
        new = super().clone()
        new.system = self.system.clone()
        return new


def make_linearizer(
    system: DiscreteControlledSystem,
    config: Optional[LinearizerConfig] = None,
) -> DiscreteLinearSystem:
    """Create a linearizer for a system as described by config."""
    config = config or LinearizerConfig()
    logger.debug(
        "Creating {} linearizer for system with state_dim={}, control_dim={}",
        config.method, system.state_dim, system.control_dim)
    if config.method == 'autodiff':
        return AutoDiffLinearizer(system)
    return NumDiffLinearizer(system, eps=config.eps,
                             double_sided=config.double_sided)

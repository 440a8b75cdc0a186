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

"""Discrete-time controlled systems.

A controlled system describes the one-step transition

    x_{n+1} = f(x_n, u_n, n)

where x_n is the state, u_n the control input and n the time index. If a
controller u_n = g(x_n, n) is attached, the system can be propagated
directly, x_{n+1} = f(x_n, g(x_n, n), n). Without a controller the
system is propagated with zero control.
"""

from abc import ABC, abstractmethod
import copy
from typing import Optional

import jax.numpy as jnp
from jax import Array

from ocpbridge.control.base import DiscreteController
from ocpbridge.core.errors import DimensionMismatchError, check_dimension
from ocpbridge.core.types import ArrayLike, DynamicsFn, PyTree, SystemType


class DiscreteControlledSystem(ABC):
    """Abstract discrete-time system with a control input.

    Subclasses implement _propagate_controlled_impl(). The public
    propagate_controlled() checks dimensions before delegating to it.

    Attributes:
        state_dim: Dimension of the state vector (n).
        control_dim: Dimension of the control vector (m).
        system_type: Structural tag of the system.
    """

    def __init__(
        self,
        state_dim: int,
        control_dim: int,
        controller: Optional[DiscreteController] = None,
        system_type: SystemType = SystemType.GENERAL,
    ):
        if state_dim < 1:
            raise ValueError(f"state_dim must be >= 1, got {state_dim}")
        if control_dim < 1:
            raise ValueError(f"control_dim must be >= 1, got {control_dim}")
        self.state_dim = int(state_dim)
        self.control_dim = int(control_dim)
        self.system_type = system_type
        self._controller: Optional[DiscreteController] = None
        self.set_controller(controller)

    def set_controller(self, controller: Optional[DiscreteController]):
        """Attach a controller, or detach with None.

        The controller is held by reference, not copied.
        """
        if controller is not None and controller.control_dim != self.control_dim:
            raise DimensionMismatchError(
                'controller output', (self.control_dim,), (controller.control_dim,))
        self._controller = controller

    def get_controller(self) -> Optional[DiscreteController]:
        return self._controller

    @property
    def has_controller(self) -> bool:
        return self._controller is not None

    def propagate(self, state: ArrayLike, n: int) -> Array:
        """Propagate the system forward by one step under its controller.

        Args:
            state: State to propagate from (n,).
            n: Time index.

        Returns:
            The next state x_{n+1} (n,).
        """
        state = jnp.asarray(state)
        if self._controller is not None:
            control = self._controller.compute_control(state, n)
        else:
            control = jnp.zeros(self.control_dim, dtype=state.dtype)
        return self.propagate_controlled(state, control, n)

    def propagate_controlled(self, state: ArrayLike, control: ArrayLike, n: int) -> Array:
        """Propagate the system forward by one step under a given control.

        Args:
            state: State to propagate from (n,).
            control: Control input to apply (m,).
            n: Time index.

        Returns:
            The next state x_{n+1} (n,).

        Raises:
            DimensionMismatchError: If state or control has the wrong shape.
        """
        state = check_dimension('state', jnp.asarray(state), self.state_dim)
        control = check_dimension('control', jnp.asarray(control), self.control_dim)
        return self._propagate_controlled_impl(state, control, n)

    @abstractmethod
    def _propagate_controlled_impl(self, state: Array, control: Array, n: int) -> Array:
        """Evaluate x_{n+1} = f(x_n, u_n, n) for dimension-checked inputs."""
        ...

    def clone(self) -> 'DiscreteControlledSystem':
        """Deep copy of the system.

        The clone shares the (immutable) dynamics parameters but owns an
        independent copy of the controller, so simulation branches can be
        forked without interfering with each other.
        """
        new = copy.copy(self)
        if self._controller is not None:
            new._controller = self._controller.clone()
        return new


class FunctionalDiscreteSystem(DiscreteControlledSystem):
    """Controlled system defined by a plain dynamics function.

    Example:
        >>> def pendulum(x, u, n, params):
        ...     dt = params['dt']
        ...     return jnp.array([x[0] + dt * x[1],
        ...                       x[1] + dt * (-jnp.sin(x[0]) + u[0])])
        ...
        >>> system = FunctionalDiscreteSystem(
        ...     pendulum, state_dim=2, control_dim=1, params={'dt': 0.01})
        >>> x_next = system.propagate(jnp.array([0.1, 0.0]), 0)
    """

    def __init__(
        self,
        dynamics: DynamicsFn,
        state_dim: int,
        control_dim: int,
        params: PyTree = (),
        controller: Optional[DiscreteController] = None,
        system_type: SystemType = SystemType.GENERAL,
    ):
        super().__init__(state_dim, control_dim, controller, system_type)
        self.dynamics = dynamics
        self.params = params

    def _propagate_controlled_impl(self, state: Array, control: Array, n: int) -> Array:
        x_next = jnp.asarray(self.dynamics(state, control, n, self.params))
        return check_dimension('propagated state', x_next, self.state_dim)

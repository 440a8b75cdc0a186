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

"""Cost evaluators for nonlinear programs.

A cost evaluator computes the objective of an NLP at the current value of
the shared OptVector. It does not own the OptVector; the NLP injects it
with set_opt_vector().
"""

from abc import ABC, abstractmethod
from typing import Optional

import jax
import jax.numpy as jnp
from jax import Array
import numpy as np

from ocpbridge.core.errors import ConfigurationError
from ocpbridge.nlp.opt_vector import OptVector


class DiscreteCostEvaluator(ABC):
    """Abstract objective f(x) over the shared decision variables.

    Subclasses implement cost(x) as a JAX-traceable function. The gradient
    defaults to jax.grad and may be overridden.
    """

    def __init__(self):
        self._opt_vector: Optional[OptVector] = None

    def set_opt_vector(self, opt_vector: OptVector):
        """Attach the shared decision variables. The reference is retained.

        An evaluator belongs to a single NLP: re-attaching the same OptVector
        is allowed, attaching a different one is not.

        Raises:
            ConfigurationError: If a different OptVector is already attached.
        """
        if self._opt_vector is not None and self._opt_vector is not opt_vector:
            raise ConfigurationError(
                f"{type(self).__name__} is already attached to another "
                "optimization vector")
        self._opt_vector = opt_vector

    @property
    def opt_vector(self) -> Optional[OptVector]:
        return self._opt_vector

    def _current(self) -> Array:
        if self._opt_vector is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no optimization vector attached")
        return jnp.asarray(self._opt_vector.get_optimization_vars())

    @abstractmethod
    def cost(self, x: Array) -> Array:
        """Objective value at x (scalar)."""
        ...

    def cost_gradient(self, x: Array) -> Array:
        return jax.grad(self.cost)(x)

    def evaluate(self) -> float:
        """Objective at the current decision variables."""
        return float(self.cost(self._current()))

    def evaluate_gradient(self) -> np.ndarray:
        """Objective gradient at the current decision variables."""
        return np.asarray(self.cost_gradient(self._current()), dtype=np.float64)

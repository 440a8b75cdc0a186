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

"""Shared optimization variable of a nonlinear program."""

import numpy as np

from ocpbridge.core.errors import check_dimension
from ocpbridge.core.types import ArrayLike


class OptVector:
    """Fixed-length buffer of decision variables plus a stored initial guess.

    One OptVector is shared by reference between the cost evaluator and the
    constraint container of a nonlinear program. All writes copy into the
    same underlying buffer, so every holder observes the latest values
    immediately; the buffer is never replaced or resized.

    The initial guess is stored separately and only copied into the
    decision variables when a solver calls reset_to_initial_guess().

    Not thread-safe: an OptVector must not be handed to two concurrently
    running solvers.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"size must be >= 1, got {size}")
        self._x = np.zeros(int(size))
        self._initial_guess = np.zeros(int(size))

    @property
    def size(self) -> int:
        return self._x.shape[0]

    def set_zero(self):
        self._x[:] = 0.0

    def get_optimization_vars(self) -> np.ndarray:
        """Return a copy of the current decision variables."""
        return self._x.copy()

    def set_optimization_vars(self, x: ArrayLike):
        """Overwrite the decision variables in place."""
        x = check_dimension('optimization variables',
                            np.asarray(x, dtype=np.float64), self.size)
        self._x[:] = x

    def get_initial_guess(self) -> np.ndarray:
        return self._initial_guess.copy()

    def set_initial_guess(self, x0: ArrayLike):
        """Store an initial guess without touching the decision variables."""
        x0 = check_dimension('initial guess',
                             np.asarray(x0, dtype=np.float64), self.size)
        self._initial_guess[:] = x0

    def reset_to_initial_guess(self):
        self._x[:] = self._initial_guess

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"OptVector(x={self._x.tolist()}, initial_guess={self._initial_guess.tolist()})"

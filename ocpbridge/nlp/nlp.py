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

"""Base class for nonlinear programs consumed by NLP solvers.

An NLP solver expects three collaborators that agree on one set of
decision variables:

    variables    the shared OptVector the solver reads and writes
    objective    a DiscreteCostEvaluator reading that OptVector
    constraints  a DiscreteConstraintContainer reading that OptVector

Concrete NLPs create the OptVector once and wire the same instance into
both the cost evaluator and the constraint container.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional

import numpy as np

from ocpbridge.core.types import ArrayLike, Bounds
from ocpbridge.nlp.constraints import DiscreteConstraintContainer
from ocpbridge.nlp.cost_evaluator import DiscreteCostEvaluator
from ocpbridge.nlp.opt_vector import OptVector


class NlpTriple(NamedTuple):
    """The collaborators an NLP solver consumes."""
    variables: OptVector
    objective: DiscreteCostEvaluator
    constraints: Optional[DiscreteConstraintContainer]


class Nlp(ABC):
    """Abstract nonlinear program min f(x) s.t. bounds and constraints.

    Attributes:
        opt_variables: Shared decision variables.
        cost_evaluator: Objective, reading opt_variables.
        constraints: Constraint container reading opt_variables, or None.
    """

    opt_variables: OptVector
    cost_evaluator: DiscreteCostEvaluator
    constraints: Optional[DiscreteConstraintContainer] = None

    @abstractmethod
    def update_problem(self):
        """Refresh problem data before a solve, e.g. a linearization point."""
        ...

    @property
    def triple(self) -> NlpTriple:
        return NlpTriple(self.opt_variables, self.cost_evaluator, self.constraints)

    def get_variable_count(self) -> int:
        return self.opt_variables.size

    def get_constraint_count(self) -> int:
        return 0 if self.constraints is None else self.constraints.constraint_count

    def get_initial_guess(self) -> np.ndarray:
        return self.opt_variables.get_initial_guess()

    def extract_optimization_vars(self, x: ArrayLike):
        """Write solver iterate x into the shared decision variables."""
        self.opt_variables.set_optimization_vars(x)

    def get_optimization_vars(self) -> np.ndarray:
        return self.opt_variables.get_optimization_vars()

    def evaluate_cost(self) -> float:
        return self.cost_evaluator.evaluate()

    def evaluate_cost_gradient(self) -> np.ndarray:
        return self.cost_evaluator.evaluate_gradient()

    def evaluate_constraints(self) -> np.ndarray:
        if self.constraints is None:
            return np.zeros(0)
        return self.constraints.evaluate_constraints()

    def evaluate_constraint_jacobian(self) -> np.ndarray:
        if self.constraints is None:
            return np.zeros((0, self.get_variable_count()))
        return self.constraints.evaluate_jacobian()

    def get_constraint_bounds(self) -> Bounds:
        if self.constraints is None:
            return np.zeros(0), np.zeros(0)
        return self.constraints.get_constraint_bounds()

    def get_variable_bounds(self) -> Bounds:
        if self.constraints is None:
            inf = np.full(self.get_variable_count(), np.inf)
            return -inf, inf
        return self.constraints.get_variable_bounds()

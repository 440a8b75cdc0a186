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

"""Inverse kinematics as a nonlinear program.

The decision variables are the joint positions. IKNLP creates the shared
OptVector, hands it to the cost evaluator and builds a joint-limit
container on the same vector, so whatever a solver writes is seen by
both collaborators.
"""

from loguru import logger
import numpy as np

from ocpbridge.core.errors import DimensionMismatchError
from ocpbridge.core.types import ArrayLike
from ocpbridge.ik.constraints import IKConstraintsContainer
from ocpbridge.ik.cost_evaluator import IKCostEvaluator
from ocpbridge.nlp.nlp import Nlp
from ocpbridge.nlp.opt_vector import OptVector


class IKNLP(Nlp):
    """Joint-space search for a task-space target within joint limits.

    Example:
        >>> arm = PlanarSerialChain([1.0, 1.0])
        >>> cost = IKCostEvaluator(arm, arm.n_joints, target=[1.0, 1.0])
        >>> ik = IKNLP(cost, lower_bound=[-3.0, -3.0], upper_bound=[3.0, 3.0])
        >>> ik.set_initial_guess([0.1, 0.1])
        >>> ScipyNlpSolver(ik).solve()
        >>> q = ik.get_solution()

    Raises:
        DimensionMismatchError: If a bound's length differs from the
            number of joints.
        InvalidBoundsError: If lower_bound[i] > upper_bound[i] for any i.
        ConfigurationError: If the cost evaluator already belongs to another
            NLP.
    """

    def __init__(
        self,
        cost_evaluator: IKCostEvaluator,
        lower_bound: ArrayLike,
        upper_bound: ArrayLike,
    ):
        n_joints = cost_evaluator.n_joints
        for name, bound in (('lower bound', lower_bound), ('upper bound', upper_bound)):
            shape = np.shape(bound)
            if shape != (n_joints,):
                raise DimensionMismatchError(f'joint {name}', (n_joints,), shape)

        opt_variables = OptVector(n_joints)
        opt_variables.set_zero()

        constraints = IKConstraintsContainer(opt_variables, lower_bound, upper_bound)
        cost_evaluator.set_opt_vector(opt_variables)

        self.opt_variables = opt_variables
        self.cost_evaluator = cost_evaluator
        self.constraints = constraints
        logger.debug("Created IK NLP with {} joints", n_joints)

    def update_problem(self):
        # The IK problem is static for a solve.
        pass

    def get_solution(self) -> np.ndarray:
        """Current joint positions held by the shared decision variables."""
        return self.opt_variables.get_optimization_vars()

    def print_solution(self):
        logger.info("IKNLP Solution: {}", self.get_solution())

    def get_cost_evaluator(self) -> IKCostEvaluator:
        return self.cost_evaluator

    get_ik_cost_evaluator = get_cost_evaluator

    def set_initial_guess(self, q_init: ArrayLike):
        self.opt_variables.set_initial_guess(q_init)

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

"""Bridge between problem formulations and generic NLP solvers.

- OptVector: Decision variables shared by all NLP collaborators
- DiscreteCostEvaluator: Objective over the shared variables
- DiscreteConstraintContainer, BoxConstraintContainer,
  FunctionConstraintContainer: Bounds and constraints over the shared variables
- Nlp: Assembles the (variables, objective, constraints) triple
- NlpSolver, ScipyNlpSolver: Drive a solver engine against an Nlp
"""

from ocpbridge.nlp.opt_vector import OptVector

from ocpbridge.nlp.cost_evaluator import DiscreteCostEvaluator

from ocpbridge.nlp.constraints import (
    DiscreteConstraintContainer,
    BoxConstraintContainer,
    FunctionConstraintContainer,
)

from ocpbridge.nlp.nlp import (
    Nlp,
    NlpTriple,
)

from ocpbridge.nlp.config import NlpSolverConfig

from ocpbridge.nlp.solver import (
    NlpSolution,
    NlpSolver,
    ScipyNlpSolver,
)

__all__ = [
    'OptVector',
    'DiscreteCostEvaluator',
    'DiscreteConstraintContainer',
    'BoxConstraintContainer',
    'FunctionConstraintContainer',
    'Nlp',
    'NlpTriple',
    'NlpSolverConfig',
    'NlpSolution',
    'NlpSolver',
    'ScipyNlpSolver',
]

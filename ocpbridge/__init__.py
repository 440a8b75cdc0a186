"""ocpbridge: Optimal control problem formulation and NLP bridges in JAX.

Defines the data structures that describe an optimal control problem
instance and the adapters that expose specific problems to generic
nonlinear programming solvers.

Main modules:
- ocpbridge.core: OptimalControlProblem, constraint slots, errors, types
- ocpbridge.control: Controllers (constant, state feedback)
- ocpbridge.systems: Discrete-time controlled systems and linearizers
- ocpbridge.costs: Quadratic cost functions
- ocpbridge.nlp: Shared decision variables, NLP base class, solver adapters
- ocpbridge.ik: Inverse kinematics NLP
"""

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

from . import core
from . import control
from . import systems
from . import costs
from . import nlp
from . import ik

from ocpbridge.core import (
    OptimalControlProblem,
    ConfigurationError,
    DimensionMismatchError,
    InvalidBoundsError,
)
from ocpbridge.control import ConstantController, DiscreteController
from ocpbridge.systems import DiscreteControlledSystem
from ocpbridge.nlp import OptVector, Nlp
from ocpbridge.ik import IKNLP

__version__ = '0.1.0'

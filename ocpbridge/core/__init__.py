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

"""Core abstractions for optimal control problems.

- OptimalControlProblem: Problem specification (dynamics, cost, horizon,
  initial state, optional linearization and constraints)
- ConstraintContainer, BoxConstraint, GeneralConstraint: Constraint slots
- Error types and type definitions shared across the package
"""

from ocpbridge.core.types import (
    PyTree,
    ArrayLike,
    Time,
    SystemType,
    NlpStatus,
    DynamicsFn,
    ConstraintFn,
    ForwardKinematicsFn,
    Jacobians,
    Bounds,
)

from ocpbridge.core.errors import (
    OcpBridgeError,
    ConfigurationError,
    DimensionMismatchError,
    InvalidBoundsError,
    check_dimension,
)

from ocpbridge.core.constraints import (
    ConstraintContainer,
    BoxConstraint,
    GeneralConstraint,
    validate_bounds,
)

from ocpbridge.core.problem import OptimalControlProblem

__all__ = [
    # Types
    'PyTree',
    'ArrayLike',
    'Time',
    'SystemType',
    'NlpStatus',
    'DynamicsFn',
    'ConstraintFn',
    'ForwardKinematicsFn',
    'Jacobians',
    'Bounds',
    # Errors
    'OcpBridgeError',
    'ConfigurationError',
    'DimensionMismatchError',
    'InvalidBoundsError',
    'check_dimension',
    # Constraints
    'ConstraintContainer',
    'BoxConstraint',
    'GeneralConstraint',
    'validate_bounds',
    # Problem
    'OptimalControlProblem',
]

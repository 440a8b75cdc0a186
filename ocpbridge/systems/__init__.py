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

"""Discrete-time controlled systems and their linearizations.

- DiscreteControlledSystem: One-step transition x_{n+1} = f(x_n, u_n, n)
  with an optional controller
- FunctionalDiscreteSystem: Controlled system from a dynamics function
- DiscreteLinearSystem / LinearTimeInvariantSystem: Systems exposing
  their Jacobians
- AutoDiffLinearizer / NumDiffLinearizer: Jacobians of nonlinear systems
- rollout / rollout_controls: Closed- and open-loop simulation
"""

from ocpbridge.systems.discrete import (
    DiscreteControlledSystem,
    FunctionalDiscreteSystem,
)

from ocpbridge.systems.linear import (
    DiscreteLinearSystem,
    LinearTimeInvariantSystem,
)

from ocpbridge.systems.config import LinearizerConfig

from ocpbridge.systems.linearizer import (
    AutoDiffLinearizer,
    NumDiffLinearizer,
    make_linearizer,
)

from ocpbridge.systems.rollout import (
    rollout,
    rollout_controls,
)

__all__ = [
    'DiscreteControlledSystem',
    'FunctionalDiscreteSystem',
    'DiscreteLinearSystem',
    'LinearTimeInvariantSystem',
    'LinearizerConfig',
    'AutoDiffLinearizer',
    'NumDiffLinearizer',
    'make_linearizer',
    'rollout',
    'rollout_controls',
]

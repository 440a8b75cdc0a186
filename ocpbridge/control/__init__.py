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

"""Controllers that close the loop on discrete-time controlled systems.

- DiscreteController: Abstract base (compute_control, clone)
- ConstantController: State and time invariant control
- StateFeedbackController: Affine state feedback u = u_ff + K (x - x_ref)
"""

from ocpbridge.control.base import DiscreteController
from ocpbridge.control.constant import ConstantController
from ocpbridge.control.feedback import StateFeedbackController

__all__ = [
    'DiscreteController',
    'ConstantController',
    'StateFeedbackController',
]

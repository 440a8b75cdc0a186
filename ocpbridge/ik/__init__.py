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

"""Inverse kinematics through the generic NLP bridge.

- IKNLP: Joint-space NLP with joint limits
- IKCostEvaluator: Weighted task-space error objective
- IKConstraintsContainer: Joint position limits
- PlanarSerialChain: Reference forward kinematics for planar arms
"""

from ocpbridge.ik.kinematics import PlanarSerialChain
from ocpbridge.ik.cost_evaluator import IKCostEvaluator
from ocpbridge.ik.constraints import IKConstraintsContainer
from ocpbridge.ik.ik_nlp import IKNLP

__all__ = [
    'PlanarSerialChain',
    'IKCostEvaluator',
    'IKConstraintsContainer',
    'IKNLP',
]

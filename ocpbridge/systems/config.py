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

"""Configuration for derivative approximation of controlled systems."""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional


@dataclass
class LinearizerConfig:
    """Configuration for synthesizing a linearized system.

    Attributes:
        method: 'autodiff' differentiates the dynamics with JAX; 'numdiff'
            uses finite differences and works for any dynamics, including
            ones that are not traceable by JAX.
        eps: Relative finite-difference step. If None, the square root of
            the machine epsilon of the state dtype is used.
        double_sided: Use central instead of forward differences.
    """
    method: Literal['autodiff', 'numdiff'] = 'numdiff'
    eps: Optional[float] = None
    double_sided: bool = True

    def __post_init__(self):
        if self.method not in ('autodiff', 'numdiff'):
            raise ValueError(
                f"method must be 'autodiff' or 'numdiff', got {self.method!r}")
        if self.eps is not None and self.eps <= 0:
            raise ValueError(f"eps must be > 0, got {self.eps}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'method': self.method,
            'eps': self.eps,
            'double_sided': self.double_sided,
        }

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

"""Configuration classes for NLP solvers."""

from dataclasses import dataclass, field
from typing import Any, Dict, Literal


@dataclass
class NlpSolverConfig:
    """Configuration for an NLP solver backend.

    Attributes:
        method: scipy.optimize.minimize method. Methods that accept
            general constraints are 'SLSQP', 'trust-constr' and 'COBYLA';
            'L-BFGS-B' handles variable bounds only.
        max_iterations: Maximum solver iterations.
        tolerance: Convergence tolerance.
        use_gradient: Pass analytic gradients to the solver.
        verbose: Whether to print solver progress.
    """
    method: Literal['SLSQP', 'trust-constr', 'L-BFGS-B', 'COBYLA'] = 'SLSQP'
    max_iterations: int = 200
    tolerance: float = 1e-8
    use_gradient: bool = True
    verbose: bool = False

    # Additional solver kwargs
    extra_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be > 0, got {self.tolerance}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the options dictionary passed to the solver."""
        base = {'maxiter': self.max_iterations}
        if self.verbose:
            base['disp'] = True
        base.update(self.extra_options)
        return base

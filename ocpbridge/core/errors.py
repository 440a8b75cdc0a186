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

"""Exceptions raised when a problem or bridge is used outside its contract."""


class OcpBridgeError(Exception):
    """Base class for all ocpbridge errors."""


class ConfigurationError(OcpBridgeError, ValueError):
    """A problem is missing a required collaborator or has an invalid field."""


class DimensionMismatchError(OcpBridgeError, ValueError):
    """A vector length disagrees with the dimension fixed at construction."""

    def __init__(self, what: str, expected, actual):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{what}: expected dimension {expected}, got {actual}"
        )


class InvalidBoundsError(OcpBridgeError, ValueError):
    """A lower bound exceeds the matching upper bound."""

    def __init__(self, indices, lower, upper):
        self.indices = tuple(int(i) for i in indices)
        super().__init__(
            f"lower bound exceeds upper bound at indices {list(self.indices)}: "
            f"lower={list(lower)}, upper={list(upper)}"
        )


def check_dimension(what: str, value, expected: int):
    """Raise DimensionMismatchError unless value is a vector of length expected."""
    shape = getattr(value, 'shape', None)
    if shape is None or len(shape) != 1 or shape[0] != expected:
        raise DimensionMismatchError(what, (expected,), shape)
    return value

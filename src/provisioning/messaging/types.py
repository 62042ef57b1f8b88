# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Messaging data types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

Header = tuple[str, bytes]


@dataclass(frozen=True)
class GenericMessage:
    """Application-level message.

    ``key`` drives partition affinity and may be empty. ``headers`` keep
    their order; lists passed in are stored as tuples.
    """

    topic: str
    key: bytes = b""
    value: bytes = b""
    headers: Sequence[Header] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", tuple((k, v) for k, v in self.headers))

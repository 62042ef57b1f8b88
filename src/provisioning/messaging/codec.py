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
"""Translation between GenericMessage and the Kafka wire record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from provisioning.messaging.types import GenericMessage, Header


@dataclass(frozen=True)
class WireMessage:
    """Outbound record as handed to a writer."""

    topic: str
    key: bytes
    value: bytes
    headers: list[Header] = field(default_factory=list)


def to_wire(message: GenericMessage) -> WireMessage:
    return WireMessage(
        topic=message.topic,
        key=message.key,
        value=message.value,
        headers=list(message.headers),
    )


def from_wire(record: Any) -> GenericMessage:
    """Build a GenericMessage from a ConsumerRecord or WireMessage.

    Records produced by other clients may carry a null key or value;
    those become empty byte strings.
    """
    return GenericMessage(
        topic=record.topic,
        key=record.key if record.key is not None else b"",
        value=record.value if record.value is not None else b"",
        headers=tuple(record.headers or ()),
    )

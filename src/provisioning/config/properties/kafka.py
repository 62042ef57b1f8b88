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
"""Kafka broker configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from provisioning import KAFKA_CLIENT_ID
from provisioning.core.config import config_properties


@dataclass
class SaslProperties:
    """SASL credentials (provisioning.kafka.sasl.*). Empty mechanism disables SASL."""

    mechanism: str = ""
    username: str = ""
    password: str = ""

    def __repr__(self) -> str:
        return f"SaslProperties(mechanism={self.mechanism!r}, username={self.username!r}, password='***')"


@config_properties(prefix="provisioning.kafka")
@dataclass
class KafkaProperties:
    """Configuration for the message broker (provisioning.kafka.*).

    ``provider`` selects the broker implementation: ``kafka`` talks to the
    listed brokers, ``memory`` keeps messages inside the process.
    ``ca_cert`` is an optional path to a PEM bundle; when set, connections
    use TLS 1.3 trusting only those authorities.
    """

    provider: str = "kafka"
    brokers: list[str] = field(default_factory=lambda: ["localhost:9092"])
    ca_cert: str = ""
    client_id: str = KAFKA_CLIENT_ID
    timeout: float = 10.0
    sasl: SaslProperties = field(default_factory=SaslProperties)

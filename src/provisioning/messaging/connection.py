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
"""Connection descriptors shared by every reader and writer of a broker."""

from __future__ import annotations

import enum
import ssl
from dataclasses import dataclass
from typing import Any

from provisioning import KAFKA_CLIENT_ID
from provisioning.messaging.security import SaslMechanism, Security

DEFAULT_TIMEOUT = 10.0


class ConnectionRole(enum.Enum):
    SUBSCRIBE = "subscribe"
    PUBLISH = "publish"


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Immutable client-side settings for opening broker sessions.

    ``timeout`` bounds the connect phase of each session, in seconds.
    """

    role: ConnectionRole
    client_id: str = KAFKA_CLIENT_ID
    ssl_context: ssl.SSLContext | None = None
    sasl: SaslMechanism | None = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def security_protocol(self) -> str:
        if self.sasl is not None:
            return "SASL_SSL" if self.ssl_context is not None else "SASL_PLAINTEXT"
        return "SSL" if self.ssl_context is not None else "PLAINTEXT"

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments for AIOKafkaConsumer / AIOKafkaProducer."""
        options: dict[str, Any] = {
            "client_id": self.client_id,
            "security_protocol": self.security_protocol,
        }
        if self.ssl_context is not None:
            options["ssl_context"] = self.ssl_context
        if self.sasl is not None:
            options.update(self.sasl.client_options())
        return options


def build_connections(
    security: Security,
    client_id: str = KAFKA_CLIENT_ID,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[ConnectionDescriptor, ConnectionDescriptor]:
    """Return the (subscribe, publish) descriptors. Performs no network I/O."""
    subscribe = ConnectionDescriptor(
        role=ConnectionRole.SUBSCRIBE,
        client_id=client_id,
        ssl_context=security.ssl_context,
        sasl=security.sasl,
        timeout=timeout,
    )
    publish = ConnectionDescriptor(
        role=ConnectionRole.PUBLISH,
        client_id=client_id,
        ssl_context=security.ssl_context,
        sasl=security.sasl,
        timeout=timeout,
    )
    return subscribe, publish

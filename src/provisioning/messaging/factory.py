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
"""Broker construction from configuration."""

from __future__ import annotations

from provisioning.config.properties.kafka import KafkaProperties
from provisioning.core.config import Config
from provisioning.kernel.exceptions import ConfigurationException
from provisioning.logging.port import LoggingPort
from provisioning.messaging.ports.outbound import BrokerPort

PROVIDERS = ("kafka", "memory")
MESSAGING_LOGGER = "provisioning.messaging"


def create_broker(config: Config, logging_port: LoggingPort | None = None) -> BrokerPort:
    """Build the broker selected by ``provisioning.kafka.provider``.

    Call once at startup and pass the result to whatever needs it.
    Broker events go to the ``provisioning.messaging`` logger of
    *logging_port*, or to structlog directly when none is given.
    Configuration errors propagate; no degraded broker is returned.
    """
    logger = logging_port.get_logger(MESSAGING_LOGGER) if logging_port is not None else None
    properties = config.bind(KafkaProperties)
    provider = properties.provider.lower()

    if provider == "kafka":
        from provisioning.messaging.adapters.kafka import KafkaBroker

        return KafkaBroker.from_properties(properties, logger=logger)

    if provider == "memory":
        from provisioning.messaging.adapters.memory import InMemoryBroker

        return InMemoryBroker(logger=logger)

    raise ConfigurationException(
        f"unknown messaging provider: {properties.provider}",
        code="CONFIG_PROVIDER",
        context={"provider": properties.provider, "supported": list(PROVIDERS)},
    )

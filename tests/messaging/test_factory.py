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
"""Tests for broker construction from configuration."""

from __future__ import annotations

import pytest

from provisioning.core.config import Config
from provisioning.kernel.exceptions import ConfigurationException, UnknownSaslMechanismException
from provisioning.messaging.adapters.kafka import KafkaBroker
from provisioning.messaging.adapters.memory import InMemoryBroker
from provisioning.messaging.factory import create_broker


def _config(**kafka) -> Config:
    return Config({"provisioning": {"kafka": kafka}})


class TestCreateBroker:
    def test_kafka_provider(self) -> None:
        broker = create_broker(_config(provider="kafka", brokers=["k:9092"]))
        assert isinstance(broker, KafkaBroker)
        assert broker.brokers == ("k:9092",)

    def test_default_provider_is_kafka(self) -> None:
        assert isinstance(create_broker(Config.from_file(None)), KafkaBroker)

    def test_memory_provider(self) -> None:
        assert isinstance(create_broker(_config(provider="Memory")), InMemoryBroker)

    def test_env_selects_brokers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROVISIONING_KAFKA_BROKERS", "a:1,b:2")
        broker = create_broker(_config())
        assert isinstance(broker, KafkaBroker)
        assert broker.brokers == ("a:1", "b:2")

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationException, match="unknown messaging provider: rabbitmq"):
            create_broker(_config(provider="rabbitmq"))

    def test_sasl_error_aborts_construction(self) -> None:
        config = _config(sasl={"mechanism": "digest-md5", "username": "u", "password": "p"})
        with pytest.raises(UnknownSaslMechanismException, match="digest-md5"):
            create_broker(config)

    def test_each_call_builds_an_independent_broker(self) -> None:
        config = _config(provider="memory")
        assert create_broker(config) is not create_broker(config)

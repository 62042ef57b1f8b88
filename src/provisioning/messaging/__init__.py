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
"""Provisioning messaging — broker abstraction with pluggable adapters."""

from provisioning.messaging.adapters.memory import InMemoryBroker
from provisioning.messaging.broker import BaseBroker
from provisioning.messaging.codec import WireMessage, from_wire, to_wire
from provisioning.messaging.factory import create_broker
from provisioning.messaging.ports.outbound import BrokerPort, MessageHandler
from provisioning.messaging.types import GenericMessage

__all__ = [
    "BaseBroker",
    "BrokerPort",
    "GenericMessage",
    "InMemoryBroker",
    "MessageHandler",
    "WireMessage",
    "create_broker",
    "from_wire",
    "to_wire",
]

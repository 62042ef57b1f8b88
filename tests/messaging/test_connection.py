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
"""Tests for connection descriptors."""

from __future__ import annotations

import dataclasses
import ssl

import pytest

from provisioning.messaging.connection import (
    ConnectionDescriptor,
    ConnectionRole,
    build_connections,
)
from provisioning.messaging.security import PlainMechanism, ScramSha512Mechanism, Security


@pytest.fixture
def tls_context() -> ssl.SSLContext:
    return ssl.create_default_context()


class TestSecurityProtocol:
    def test_plaintext(self) -> None:
        assert ConnectionDescriptor(role=ConnectionRole.PUBLISH).security_protocol == "PLAINTEXT"

    def test_ssl(self, tls_context: ssl.SSLContext) -> None:
        descriptor = ConnectionDescriptor(role=ConnectionRole.PUBLISH, ssl_context=tls_context)
        assert descriptor.security_protocol == "SSL"

    def test_sasl_plaintext(self) -> None:
        descriptor = ConnectionDescriptor(
            role=ConnectionRole.SUBSCRIBE,
            sasl=PlainMechanism(username="u", password="p"),
        )
        assert descriptor.security_protocol == "SASL_PLAINTEXT"

    def test_sasl_ssl(self, tls_context: ssl.SSLContext) -> None:
        descriptor = ConnectionDescriptor(
            role=ConnectionRole.SUBSCRIBE,
            ssl_context=tls_context,
            sasl=PlainMechanism(username="u", password="p"),
        )
        assert descriptor.security_protocol == "SASL_SSL"


class TestClientOptions:
    def test_plaintext_options(self) -> None:
        descriptor = ConnectionDescriptor(role=ConnectionRole.PUBLISH, client_id="svc")
        assert descriptor.client_options() == {"client_id": "svc", "security_protocol": "PLAINTEXT"}

    def test_full_options(self, tls_context: ssl.SSLContext) -> None:
        descriptor = ConnectionDescriptor(
            role=ConnectionRole.PUBLISH,
            ssl_context=tls_context,
            sasl=ScramSha512Mechanism(username="u", password="p"),
        )
        options = descriptor.client_options()
        assert options["client_id"] == "provisioning-backend"
        assert options["security_protocol"] == "SASL_SSL"
        assert options["ssl_context"] is tls_context
        assert options["sasl_mechanism"] == "SCRAM-SHA-512"
        assert options["sasl_plain_username"] == "u"
        assert options["sasl_plain_password"] == "p"


class TestBuildConnections:
    def test_descriptors_share_security_and_differ_by_role(self, tls_context: ssl.SSLContext) -> None:
        sasl = PlainMechanism(username="u", password="p")
        subscribe, publish = build_connections(
            Security(ssl_context=tls_context, sasl=sasl),
            client_id="svc",
            timeout=3.0,
        )
        assert subscribe.role is ConnectionRole.SUBSCRIBE
        assert publish.role is ConnectionRole.PUBLISH
        for descriptor in (subscribe, publish):
            assert descriptor.ssl_context is tls_context
            assert descriptor.sasl is sasl
            assert descriptor.client_id == "svc"
            assert descriptor.timeout == 3.0

    def test_defaults(self) -> None:
        subscribe, publish = build_connections(Security())
        assert subscribe.client_id == publish.client_id == "provisioning-backend"
        assert subscribe.timeout == publish.timeout == 10.0

    def test_descriptors_are_immutable(self) -> None:
        subscribe, _ = build_connections(Security())
        with pytest.raises(dataclasses.FrozenInstanceError):
            subscribe.client_id = "other"  # type: ignore[misc]

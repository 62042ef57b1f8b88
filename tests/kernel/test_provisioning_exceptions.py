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
"""Tests for the provisioning exception hierarchy."""

from provisioning.kernel.exceptions import (
    BusinessException,
    ConfigurationException,
    DifferentTopicsException,
    EndOfStreamException,
    InfrastructureException,
    MessagingException,
    ProvisioningException,
    UnknownSaslMechanismException,
    ValidationException,
)


class TestProvisioningException:
    def test_basic_creation(self):
        exc = ProvisioningException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = ProvisioningException("bad", code="CONFIG_TLS", context={"path": "/ca.pem"})
        assert exc.code == "CONFIG_TLS"
        assert exc.context["path"] == "/ca.pem"

    def test_context_not_shared_between_instances(self):
        exc = ProvisioningException("a")
        exc.context["key"] = "value"
        assert ProvisioningException("b").context == {}


class TestExceptionHierarchy:
    def test_configuration_is_provisioning(self):
        assert issubclass(ConfigurationException, ProvisioningException)

    def test_unknown_mechanism_is_configuration(self):
        assert issubclass(UnknownSaslMechanismException, ConfigurationException)

    def test_different_topics_is_validation(self):
        assert issubclass(DifferentTopicsException, ValidationException)
        assert issubclass(ValidationException, BusinessException)

    def test_end_of_stream_is_messaging(self):
        assert issubclass(EndOfStreamException, MessagingException)
        assert issubclass(MessagingException, InfrastructureException)


class TestDomainExceptions:
    def test_unknown_mechanism_names_the_mechanism(self):
        exc = UnknownSaslMechanismException("gssapi")
        assert "gssapi" in str(exc)
        assert exc.context == {"mechanism": "gssapi"}
        assert exc.code == "CONFIG_SASL_MECHANISM"

    def test_different_topics_carries_both_topics(self):
        exc = DifferentTopicsException(expected="orders", actual="payments")
        assert str(exc) == "messages in batch have different topics"
        assert exc.context == {"expected": "orders", "actual": "payments"}

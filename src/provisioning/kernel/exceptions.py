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
"""Unified exception hierarchy for the provisioning messaging layer.

All exceptions inherit from ProvisioningException, so callers can catch the
base class to handle every failure raised by this package, or a specific
subclass for targeted handling.

Categories:
- ConfigurationException: invalid settings detected while building a broker
- BusinessException: caller-side rule violations, such as mixed-topic batches
- InfrastructureException: transport failures talking to the broker
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class ProvisioningException(Exception):
    """Base exception for all provisioning errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_TLS").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(ProvisioningException):
    """Settings are missing or invalid; the broker cannot be constructed."""


class UnknownSaslMechanismException(ConfigurationException):
    """The configured SASL mechanism name is not one of the supported ones."""

    def __init__(self, mechanism: str) -> None:
        super().__init__(
            f"unknown SASL mechanism: {mechanism}",
            code="CONFIG_SASL_MECHANISM",
            context={"mechanism": mechanism},
        )


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(ProvisioningException):
    """Rule violations caused by the caller's input."""


class ValidationException(BusinessException):
    """Input validation failures."""


class DifferentTopicsException(ValidationException):
    """Messages in one batch do not share the same topic."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            "messages in batch have different topics",
            code="MESSAGING_DIFFERENT_TOPICS",
            context={"expected": expected, "actual": actual},
        )


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(ProvisioningException):
    """Infrastructure failures: network, broker, transport."""


class MessagingException(InfrastructureException):
    """The messaging transport failed to deliver or fetch messages."""


class EndOfStreamException(MessagingException):
    """A reader has been closed and will not return further messages."""

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
"""Connection security: TLS trust context and SASL mechanism selection."""

from __future__ import annotations

import os
import ssl
import stringprep
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from aiokafka.helpers import create_ssl_context

from provisioning.config.properties.kafka import KafkaProperties
from provisioning.kernel.exceptions import (
    ConfigurationException,
    UnknownSaslMechanismException,
)

_PEM_CERTIFICATE_MARKER = "-----BEGIN CERTIFICATE-----"

_PROHIBITED = (
    stringprep.in_table_c12,
    stringprep.in_table_c21_c22,
    stringprep.in_table_c3,
    stringprep.in_table_c4,
    stringprep.in_table_c5,
    stringprep.in_table_c6,
    stringprep.in_table_c7,
    stringprep.in_table_c8,
    stringprep.in_table_c9,
)


@dataclass(frozen=True)
class SaslMechanism:
    """Credentials for one SASL mechanism, shared read-only by every connection."""

    mechanism: ClassVar[str] = ""

    username: str
    password: str = field(repr=False)

    def client_options(self) -> dict[str, Any]:
        return {
            "sasl_mechanism": self.mechanism,
            "sasl_plain_username": self.username,
            "sasl_plain_password": self.password,
        }


@dataclass(frozen=True)
class PlainMechanism(SaslMechanism):
    mechanism: ClassVar[str] = "PLAIN"


@dataclass(frozen=True)
class ScramSha256Mechanism(SaslMechanism):
    mechanism: ClassVar[str] = "SCRAM-SHA-256"


@dataclass(frozen=True)
class ScramSha512Mechanism(SaslMechanism):
    mechanism: ClassVar[str] = "SCRAM-SHA-512"


_SCRAM_MECHANISMS: dict[str, type[SaslMechanism]] = {
    "scram-sha-256": ScramSha256Mechanism,
    "scram-sha-512": ScramSha512Mechanism,
}


@dataclass(frozen=True)
class Security:
    """Negotiated security artifacts; either may be absent."""

    ssl_context: ssl.SSLContext | None = None
    sasl: SaslMechanism | None = None


def saslprep(value: str) -> str:
    """Prepare a SCRAM username or password (RFC 4013).

    Raises ValueError when the string contains prohibited or unassigned
    characters or violates the bidirectional text rules.
    """
    mapped = "".join(
        " " if stringprep.in_table_c12(ch) else ch
        for ch in value
        if not stringprep.in_table_b1(ch)
    )
    prepared = unicodedata.normalize("NFKC", mapped)
    if not prepared:
        return prepared

    for ch in prepared:
        if any(check(ch) for check in _PROHIBITED):
            raise ValueError(f"prohibited character U+{ord(ch):04X}")
        if stringprep.in_table_a1(ch):
            raise ValueError(f"unassigned code point U+{ord(ch):04X}")

    if any(stringprep.in_table_d1(ch) for ch in prepared):
        if any(stringprep.in_table_d2(ch) for ch in prepared):
            raise ValueError("mixed left-to-right and right-to-left text")
        if not (stringprep.in_table_d1(prepared[0]) and stringprep.in_table_d1(prepared[-1])):
            raise ValueError("right-to-left text must start and end with a right-to-left character")

    return prepared


def create_sasl_mechanism(name: str, username: str, password: str) -> SaslMechanism:
    """Match *name* case-insensitively against plain, scram-sha-256 and scram-sha-512."""
    key = name.lower()
    if key == "plain":
        return PlainMechanism(username=username, password=password)

    scram_cls = _SCRAM_MECHANISMS.get(key)
    if scram_cls is None:
        raise UnknownSaslMechanismException(name)

    try:
        return scram_cls(username=saslprep(username), password=saslprep(password))
    except ValueError as exc:
        raise ConfigurationException(
            f"unable to create {key} mechanism: {exc}",
            code="CONFIG_SASL_CREDENTIALS",
            context={"mechanism": key},
        ) from exc


def create_tls_context(ca_path: str) -> ssl.SSLContext:
    """Build a TLS 1.3 client context trusting only the PEM bundle at *ca_path*."""
    path = Path(os.path.normpath(ca_path))
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigurationException(
            f"unable to read kafka CA cert: {exc}",
            code="CONFIG_TLS",
            context={"path": str(path)},
        ) from exc

    try:
        pem = raw.decode("utf-8")
        if _PEM_CERTIFICATE_MARKER not in pem:
            raise ValueError("no PEM certificate found")
        context = create_ssl_context(cadata=pem)
    except (ValueError, ssl.SSLError) as exc:
        raise ConfigurationException(
            f"unable to parse kafka CA cert: {exc}",
            code="CONFIG_TLS",
            context={"path": str(path)},
        ) from exc

    context.minimum_version = ssl.TLSVersion.TLSv1_3
    return context


def build_security(properties: KafkaProperties) -> Security:
    ssl_context = create_tls_context(properties.ca_cert) if properties.ca_cert else None

    sasl = None
    if properties.sasl.mechanism:
        sasl = create_sasl_mechanism(
            properties.sasl.mechanism,
            properties.sasl.username,
            properties.sasl.password,
        )

    return Security(ssl_context=ssl_context, sasl=sasl)

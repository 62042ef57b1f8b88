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
"""provisioning-messaging CLI — inspect configuration, send and consume messages."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Coroutine
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
from rich.markup import escape
from rich.table import Table

from provisioning.cli.console import console
from provisioning.config.properties.logging import LoggingProperties
from provisioning.core.config import Config
from provisioning.kernel.exceptions import ConfigurationException, MessagingException
from provisioning.logging.context import bind_request_context, clear_request_context
from provisioning.logging.port import LoggingPort
from provisioning.logging.structlog_adapter import StructlogAdapter
from provisioning.messaging.adapters.kafka import KafkaBroker
from provisioning.messaging.factory import create_broker
from provisioning.messaging.ports.outbound import BrokerPort
from provisioning.messaging.types import GenericMessage


@dataclass(frozen=True)
class Session:
    """What every command shares: loaded configuration and the configured logging."""

    config: Config
    logging: LoggingPort
    correlation_id: str


def _configuration_error(exc: ConfigurationException) -> SystemExit:
    console.print(f"[error]Configuration error:[/error] {exc}")
    return SystemExit(1)


def _build_broker(session: Session) -> BrokerPort:
    try:
        return create_broker(session.config, session.logging)
    except ConfigurationException as exc:
        raise _configuration_error(exc) from exc


def _run(session: Session, operation: Coroutine[Any, Any, None]) -> None:
    """Run *operation* with the session correlation id bound to every log event."""
    bind_request_context(correlation_id=session.correlation_id)
    try:
        asyncio.run(operation)
    finally:
        clear_request_context()


def _parse_headers(headers: tuple[str, ...]) -> list[tuple[str, bytes]]:
    parsed = []
    for header in headers:
        name, sep, value = header.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got {header!r}", param_hint="--header")
        parsed.append((name, value.encode()))
    return parsed


@click.group()
@click.version_option(package_name="provisioning-messaging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="PROVISIONING_CONFIG",
    help="YAML or TOML configuration file.",
)
@click.option("--profile", "profiles", multiple=True, help="Profile overlay to apply (repeatable).")
@click.option("--correlation-id", help="Correlation id attached to log events (generated when omitted).")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    profiles: tuple[str, ...],
    correlation_id: str | None,
) -> None:
    """Provisioning messaging — Kafka broker tooling."""
    config = Config.from_file(config_path, active_profiles=list(profiles))
    adapter = StructlogAdapter()
    try:
        adapter.configure(config.bind(LoggingProperties))
    except ConfigurationException as exc:
        raise _configuration_error(exc) from exc
    ctx.obj = Session(config, adapter, correlation_id or uuid.uuid4().hex)


@cli.command("check")
@click.pass_obj
def check_command(session: Session) -> None:
    """Build the broker from configuration and show its connection settings."""
    broker = _build_broker(session)

    table = Table(show_header=False, box=None)
    table.add_row("Provider", type(broker).__name__)
    if isinstance(broker, KafkaBroker):
        descriptor = broker.publisher
        table.add_row("Brokers", ", ".join(broker.brokers))
        table.add_row("Client ID", descriptor.client_id)
        table.add_row("Security protocol", descriptor.security_protocol)
        table.add_row("TLS", "TLS 1.3, custom CA" if descriptor.ssl_context else "[dim]off[/dim]")
        table.add_row("SASL", descriptor.sasl.mechanism if descriptor.sasl else "[dim]off[/dim]")
    console.print(table)
    console.print("[success]Configuration OK[/success]")


@cli.command("send")
@click.argument("topic")
@click.argument("value")
@click.option("--key", default="", help="Message key.")
@click.option("--header", "headers", multiple=True, help="Header as name=value (repeatable).")
@click.pass_obj
def send_command(session: Session, topic: str, value: str, key: str, headers: tuple[str, ...]) -> None:
    """Send one message to TOPIC."""
    message = GenericMessage(
        topic=topic,
        key=key.encode(),
        value=value.encode(),
        headers=_parse_headers(headers),
    )
    broker = _build_broker(session)
    try:
        _run(session, broker.send(message))
    except MessagingException as exc:
        console.print(f"[error]Send failed:[/error] {exc}")
        raise SystemExit(1) from exc
    console.print(f"[success]Sent[/success] 1 message to [info]{topic}[/info]")


@cli.command("consume")
@click.argument("topic")
@click.pass_obj
def consume_command(session: Session, topic: str) -> None:
    """Print messages published to TOPIC until interrupted."""
    broker = _build_broker(session)

    async def handler(message: GenericMessage) -> None:
        key = message.key.decode(errors="replace")
        value = message.value.decode(errors="replace")
        console.print(f"[info]{escape(message.topic)}[/info] [dim]{escape(key)}[/dim] {escape(value)}")

    console.print(f"Consuming [info]{topic}[/info], press Ctrl+C to stop")
    try:
        _run(session, broker.consume(topic, handler))
    except KeyboardInterrupt:
        pass
    except MessagingException as exc:
        console.print(f"[error]Consume failed:[/error] {exc}")
        raise SystemExit(1) from exc


def main() -> None:
    cli()

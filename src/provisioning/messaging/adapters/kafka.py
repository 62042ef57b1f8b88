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
"""Kafka message broker adapter — wraps aiokafka."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from aiokafka import AIOKafkaConsumer, AIOKafkaProducer  # type: ignore[import-untyped]
from aiokafka.errors import (  # type: ignore[import-untyped]
    ConsumerStoppedError,
    KafkaError,
    MessageSizeTooLargeError,
)

from provisioning.config.properties.kafka import KafkaProperties
from provisioning.kernel.exceptions import ConfigurationException, EndOfStreamException
from provisioning.messaging.broker import BaseBroker
from provisioning.messaging.codec import WireMessage
from provisioning.messaging.connection import ConnectionDescriptor, build_connections
from provisioning.messaging.security import build_security


class KafkaReader:
    """Subscribe session for one topic, starting at the newest offset.

    The consumer joins no group, so no offsets are committed and only
    messages published after the reader starts are returned.
    """

    def __init__(
        self,
        topic: str,
        brokers: Sequence[str],
        descriptor: ConnectionDescriptor,
        logger: Any,
    ) -> None:
        self._topic = topic
        self._brokers = list(brokers)
        self._descriptor = descriptor
        self._logger = logger.bind(topic=topic)
        self._consumer: Any = None
        self._closed = False

    async def __aenter__(self) -> KafkaReader:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self) -> None:
        self._consumer = AIOKafkaConsumer(
            self._topic,
            bootstrap_servers=self._brokers,
            auto_offset_reset="latest",
            enable_auto_commit=False,
            **self._descriptor.client_options(),
        )
        self._logger.debug("Starting consumer", brokers=self._brokers)
        try:
            await asyncio.wait_for(self._consumer.start(), timeout=self._descriptor.timeout)
        except BaseException:
            await self.close()
            raise

    async def read(self) -> Any:
        if self._consumer is None or self._closed:
            raise EndOfStreamException("reader is closed", context={"topic": self._topic})
        try:
            return await self._consumer.getone()
        except ConsumerStoppedError as exc:
            raise EndOfStreamException("reader is closed", context={"topic": self._topic}) from exc

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._consumer is not None:
            await self._consumer.stop()
            self._logger.debug("Consumer stopped")


class KafkaWriter:
    """Publish session against the broker list; each record names its topic."""

    max_request_size = 1048576
    # framing, timestamp and length prefixes of one record
    record_overhead = 64

    def __init__(
        self,
        brokers: Sequence[str],
        descriptor: ConnectionDescriptor,
        logger: Any,
    ) -> None:
        self._brokers = list(brokers)
        self._descriptor = descriptor
        self._logger = logger
        self._producer: Any = None
        self._closed = False

    async def __aenter__(self) -> KafkaWriter:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self) -> None:
        self._producer = AIOKafkaProducer(
            bootstrap_servers=self._brokers,
            max_request_size=self.max_request_size,
            **self._descriptor.client_options(),
        )
        self._logger.debug("Starting producer", brokers=self._brokers)
        try:
            await asyncio.wait_for(self._producer.start(), timeout=self._descriptor.timeout)
        except BaseException:
            await self.close()
            raise

    async def write(self, records: Sequence[WireMessage]) -> None:
        """Publish *records* as one batch and wait until all are acknowledged.

        Everything the producer rejects up front (record size, topic
        metadata) is checked before the first record is queued. aiokafka
        cannot withdraw a queued record and ``stop()`` flushes it, so a
        rejection must happen while the batch is still empty.
        """
        for record in records:
            size = self.record_size(record)
            if size > self.max_request_size:
                raise MessageSizeTooLargeError(
                    f"record of {size} bytes for topic {record.topic} exceeds "
                    f"max_request_size {self.max_request_size}"
                )
        for topic in dict.fromkeys(record.topic for record in records):
            await self._producer.partitions_for(topic)

        deliveries = []
        try:
            for record in records:
                deliveries.append(
                    await self._producer.send(
                        record.topic,
                        value=record.value,
                        key=record.key,
                        headers=list(record.headers) or None,
                    )
                )
        except Exception:
            if deliveries:
                self._logger.warning(
                    "Batch interrupted after records were queued",
                    queued=len(deliveries),
                    total=len(records),
                )
                await asyncio.gather(*deliveries, return_exceptions=True)
            raise
        await asyncio.gather(*deliveries)

    @classmethod
    def record_size(cls, record: WireMessage) -> int:
        """Upper bound of the encoded size of *record* on the wire."""
        headers = sum(len(name.encode()) + len(value) for name, value in record.headers)
        return cls.record_overhead + len(record.key) + len(record.value) + headers

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._producer is not None:
            await self._producer.stop()
            self._logger.debug("Producer stopped")


class KafkaBroker(BaseBroker):
    """BrokerPort implementation backed by Apache Kafka via aiokafka.

    Holds only immutable connection descriptors, so one instance can serve
    any number of concurrent consume tasks and send calls.
    """

    transport_errors = (KafkaError, asyncio.TimeoutError)
    read_error_backoff = 0.5

    def __init__(
        self,
        brokers: Sequence[str],
        subscriber: ConnectionDescriptor,
        publisher: ConnectionDescriptor,
        logger: Any = None,
    ) -> None:
        if not brokers:
            raise ConfigurationException("kafka broker list is empty", code="CONFIG_BROKERS")
        super().__init__(logger)
        self._brokers = tuple(brokers)
        self._subscriber = subscriber
        self._publisher = publisher

    @classmethod
    def from_properties(cls, properties: KafkaProperties, logger: Any = None) -> KafkaBroker:
        """Negotiate TLS/SASL from *properties* and build the broker.

        Raises ConfigurationException; no partially configured broker is returned.
        """
        security = build_security(properties)
        subscriber, publisher = build_connections(
            security,
            client_id=properties.client_id,
            timeout=properties.timeout,
        )
        return cls(properties.brokers, subscriber, publisher, logger=logger)

    @property
    def brokers(self) -> tuple[str, ...]:
        return self._brokers

    @property
    def subscriber(self) -> ConnectionDescriptor:
        return self._subscriber

    @property
    def publisher(self) -> ConnectionDescriptor:
        return self._publisher

    def open_reader(self, topic: str) -> KafkaReader:
        return KafkaReader(topic, self._brokers, self._subscriber, self._logger)

    def open_writer(self) -> KafkaWriter:
        return KafkaWriter(self._brokers, self._publisher, self._logger)

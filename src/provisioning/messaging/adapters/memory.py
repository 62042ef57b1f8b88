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
"""In-memory message broker for testing and single-process deployments."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from provisioning.kernel.exceptions import EndOfStreamException
from provisioning.messaging.broker import BaseBroker
from provisioning.messaging.codec import WireMessage

_END_OF_STREAM = object()


class InMemoryReader:
    def __init__(self, broker: InMemoryBroker, topic: str) -> None:
        self._broker = broker
        self._topic = topic
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False

    @property
    def topic(self) -> str:
        return self._topic

    async def __aenter__(self) -> InMemoryReader:
        self._broker._register(self)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def deliver(self, record: Any) -> None:
        self._queue.put_nowait(record)

    def end(self) -> None:
        self._queue.put_nowait(_END_OF_STREAM)

    async def read(self) -> Any:
        if self._closed:
            raise EndOfStreamException("reader is closed", context={"topic": self._topic})
        record = await self._queue.get()
        if record is _END_OF_STREAM:
            raise EndOfStreamException("end of stream", context={"topic": self._topic})
        return record

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._broker._unregister(self)


class InMemoryWriter:
    def __init__(self, broker: InMemoryBroker) -> None:
        self._broker = broker

    async def __aenter__(self) -> InMemoryWriter:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def write(self, records: Sequence[WireMessage]) -> None:
        self._broker._publish(records)

    async def close(self) -> None:
        pass


class InMemoryBroker(BaseBroker):
    """BrokerPort implementation that fans messages out inside the process.

    Readers only see messages sent after they were opened. Every published
    record is also kept in ``published``.
    """

    def __init__(self, logger: Any = None) -> None:
        super().__init__(logger)
        self._readers: dict[str, list[InMemoryReader]] = {}
        self.published: list[WireMessage] = []

    def open_reader(self, topic: str) -> InMemoryReader:
        return InMemoryReader(self, topic)

    def open_writer(self) -> InMemoryWriter:
        return InMemoryWriter(self)

    def shutdown(self) -> None:
        """End the stream of every open reader so their consume loops exit."""
        for readers in self._readers.values():
            for reader in readers:
                reader.end()

    def _register(self, reader: InMemoryReader) -> None:
        self._readers.setdefault(reader.topic, []).append(reader)

    def _unregister(self, reader: InMemoryReader) -> None:
        readers = self._readers.get(reader.topic, [])
        if reader in readers:
            readers.remove(reader)

    def _publish(self, records: Sequence[WireMessage]) -> None:
        for record in records:
            self.published.append(record)
            for reader in self._readers.get(record.topic, []):
                reader.deliver(record)

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
"""BaseBroker — consume loop and batched send shared by every broker adapter.

Adapters supply ``open_reader`` and ``open_writer``; this class owns the
semantics built on top of them:

- ``consume`` reads one record at a time and awaits the handler before the
  next read. End-of-stream and task cancellation end the loop cleanly;
  other read errors are logged and the loop carries on.
- ``send`` rejects mixed-topic batches before any writer is opened and
  writes the rest through one writer scoped to the call.
"""

from __future__ import annotations

import abc
import asyncio
from collections.abc import Sequence
from typing import Any

import structlog

from provisioning.kernel.exceptions import (
    DifferentTopicsException,
    EndOfStreamException,
    MessagingException,
)
from provisioning.messaging.codec import from_wire, to_wire
from provisioning.messaging.ports.outbound import MessageHandler, ReaderPort, WriterPort
from provisioning.messaging.types import GenericMessage


def check_same_topic(messages: Sequence[GenericMessage]) -> str:
    """Return the common topic of *messages*, or raise on the first mismatch."""
    topic = messages[0].topic
    for message in messages[1:]:
        if message.topic != topic:
            raise DifferentTopicsException(expected=topic, actual=message.topic)
    return topic


class BaseBroker(abc.ABC):
    """Abstract broker implementing ``consume`` and ``send`` over reader/writer sessions."""

    # Errors raised by the transport while opening sessions or writing.
    transport_errors: tuple[type[BaseException], ...] = (asyncio.TimeoutError,)

    # Seconds to wait after a failed read before reading again.
    read_error_backoff: float = 0.0

    def __init__(self, logger: Any = None) -> None:
        if logger is None:
            logger = structlog.get_logger("provisioning.messaging")
        self._logger = logger.bind(kafka=True)

    @abc.abstractmethod
    def open_reader(self, topic: str) -> ReaderPort:
        """Return an unopened reader for *topic*, starting at the newest offset."""
        ...

    @abc.abstractmethod
    def open_writer(self) -> WriterPort:
        """Return an unopened writer not bound to any topic."""
        ...

    async def consume(self, topic: str, handler: MessageHandler) -> None:
        """Deliver messages from *topic* to *handler* until end-of-stream or cancellation.

        Blocks for the life of the subscription; run it in its own task.
        """
        log = self._logger.bind(topic=topic)
        try:
            async with self.open_reader(topic) as reader:
                log.debug("Reader opened")
                await self._consume_loop(reader, handler, log)
        except asyncio.CancelledError:
            log.debug("Consumer cancelled")
        except self.transport_errors as exc:
            raise MessagingException(
                f"unable to open reader for topic {topic}",
                code="MESSAGING_TRANSPORT",
                context={"topic": topic},
            ) from exc
        log.debug("Reader closed")

    async def _consume_loop(self, reader: ReaderPort, handler: MessageHandler, log: Any) -> None:
        while True:
            try:
                record = await reader.read()
            except EndOfStreamException:
                log.debug("End of stream")
                return
            except Exception as exc:
                log.warning("Error when reading message", error=str(exc))
                if self.read_error_backoff:
                    await asyncio.sleep(self.read_error_backoff)
                continue

            message = from_wire(record)
            log.debug("Received message", key=message.key, size=len(message.value))
            try:
                await handler(message)
            except Exception:
                log.exception("Message handler failed", key=message.key)

    async def send(self, *messages: GenericMessage) -> None:
        """Send *messages*, which must all share one topic, in a single publish call.

        Raises:
            DifferentTopicsException: a message's topic differs from the first one's.
            MessagingException: the transport failed; nothing is retried.
        """
        if not messages:
            return

        topic = check_same_topic(messages)
        records = [to_wire(message) for message in messages]
        try:
            async with self.open_writer() as writer:
                await writer.write(records)
        except self.transport_errors as exc:
            raise MessagingException(
                f"cannot send kafka message(s): {exc}",
                code="MESSAGING_TRANSPORT",
                context={"topic": topic, "count": len(records)},
            ) from exc
        self._logger.debug("Sent messages", topic=topic, count=len(records))

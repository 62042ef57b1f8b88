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
"""Outbound ports for message broker operations."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from provisioning.messaging.codec import WireMessage
from provisioning.messaging.types import GenericMessage

MessageHandler = Callable[[GenericMessage], Awaitable[None]]


@runtime_checkable
class ReaderPort(Protocol):
    """Subscribe session bound to one topic. Released by ``async with`` exit."""

    async def __aenter__(self) -> ReaderPort: ...

    async def __aexit__(self, *exc_info: Any) -> None: ...

    async def read(self) -> Any:
        """Return the next wire record; raise EndOfStreamException once closed."""
        ...

    async def close(self) -> None: ...


@runtime_checkable
class WriterPort(Protocol):
    """Publish session not bound to a topic; topic comes from each record."""

    async def __aenter__(self) -> WriterPort: ...

    async def __aexit__(self, *exc_info: Any) -> None: ...

    async def write(self, records: Sequence[WireMessage]) -> None: ...

    async def close(self) -> None: ...


@runtime_checkable
class BrokerPort(Protocol):
    def open_reader(self, topic: str) -> ReaderPort: ...

    def open_writer(self) -> WriterPort: ...

    async def consume(self, topic: str, handler: MessageHandler) -> None: ...

    async def send(self, *messages: GenericMessage) -> None: ...

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
"""StructlogAdapter — LoggingPort backed by structlog.

Structlog events and stdlib records (aiokafka logs through ``logging``)
go to the same stream. ``provisioning.logging.level`` holds a ``root``
level plus per-logger overrides; ``provisioning.logging.format`` is
``console`` or ``json``.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from provisioning.config.properties.logging import LoggingProperties
from provisioning.kernel.exceptions import ConfigurationException

FORMATS = ("console", "json")


def parse_level(name: str, value: str) -> int:
    """Resolve a level name such as ``warning``; unknown names are configuration errors."""
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ConfigurationException(
            f"unknown log level for {name}: {value}",
            code="CONFIG_LOGGING",
            context={"logger": name, "level": value},
        )
    return level


class StructlogAdapter:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stderr
        self.root_level = logging.INFO
        self.logger_levels: dict[str, int] = {}

    def configure(self, properties: LoggingProperties) -> None:
        fmt = str(properties.format).lower()
        if fmt not in FORMATS:
            raise ConfigurationException(
                f"unknown log format: {properties.format}",
                code="CONFIG_LOGGING",
                context={"format": properties.format, "supported": list(FORMATS)},
            )
        levels = {name: parse_level(name, value) for name, value in properties.level.items()}
        self.root_level = levels.pop("root", logging.INFO)
        self.logger_levels = levels

        renderers: list[Any] = (
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
            if fmt == "json"
            else [structlog.dev.ConsoleRenderer(colors=self._stream.isatty())]
        )
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                *renderers,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=self._stream, level=self.root_level, force=True)
        for name, level in self.logger_levels.items():
            logging.getLogger(name).setLevel(level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

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
"""Request-scoped logging context.

Identifiers bound here travel in structlog context variables, so every log
event emitted in the same task (including broker events from consume loops
started inside it) carries them.
"""

from __future__ import annotations

import structlog


def bind_request_context(
    correlation_id: str | None = None,
    trace_id: str | None = None,
    edge_request_id: str | None = None,
) -> None:
    """Bind the given request identifiers; ``None`` values are skipped."""
    values = {
        "correlation_id": correlation_id,
        "trace_id": trace_id,
        "edge_request_id": edge_request_id,
    }
    structlog.contextvars.bind_contextvars(
        **{key: value for key, value in values.items() if value}
    )


def clear_request_context() -> None:
    structlog.contextvars.unbind_contextvars("correlation_id", "trace_id", "edge_request_id")

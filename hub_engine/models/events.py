from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    CONTEXT_READY = "context_ready"
    ANSWER_DELTA = "answer_delta"
    ANSWER_COMPLETE = "answer_complete"
    ERROR = "error"


@dataclass
class SSEEvent:
    event: EventType
    data: dict[str, Any] = field(default_factory=dict)

    def to_sse(self) -> dict[str, str]:
        """Shape accepted by sse-starlette's EventSourceResponse."""
        return {"event": self.event.value, "data": json.dumps(self.data)}

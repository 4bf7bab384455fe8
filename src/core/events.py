"""Progress events broadcast while repository tools run.

Events are ephemeral: built at emission time, handed to the broadcaster and
never stored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping


class EventKind(str, Enum):
    REPO_FETCH_STARTED = "repo_fetch_started"
    REPO_FETCH_COMPLETED = "repo_fetch_completed"
    REPO_FETCH_ERROR = "repo_fetch_error"
    FILE_FETCH_STARTED = "file_fetch_started"
    FILE_FETCH_COMPLETED = "file_fetch_completed"
    FILE_FETCH_ERROR = "file_fetch_error"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ProgressEvent:
    kind: EventKind
    payload: Mapping[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_timestamp)

    @property
    def name(self) -> str:
        return self.kind.value

    def data(self) -> Dict[str, Any]:
        # Timestamp travels inside the data so stream clients see it
        return {**dict(self.payload), "timestamp": self.timestamp}

    def data_json(self) -> str:
        return json.dumps(self.data())

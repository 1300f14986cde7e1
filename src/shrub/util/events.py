from __future__ import annotations

"""Batch event logging.

CONTRACT
- Inputs: Arbitrary kwargs (stage, action, model, ...)
- Outputs:
  - Appends one JSON line per event to the configured log path
- Invariants:
  - Adds `ts_ms` timestamp automatically
  - A disabled log (path=None) accepts events and writes nothing
- Failure:
  - Raises OSError if log path is not writable
"""

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class EventLog:
    path: Path | None
    run_id: str | None = None

    def emit(self, **event: Any) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        event.setdefault("ts_ms", int(time.time() * 1000))
        if self.run_id and "run_id" not in event:
            event["run_id"] = self.run_id
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")

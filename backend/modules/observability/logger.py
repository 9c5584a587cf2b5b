"""
Per-session event trail — append-only JSON lines (.jsonl).

Usage:
    from modules.observability.logger import StructuredLogger

    events = StructuredLogger()
    events.log(session_id, "WAYPOINT_ACCEPTED", {"lat": 43.51, "lng": 16.25})

Records land in  logs/<session_id>.jsonl  next to the backend/ root.
Set SESSION_LOG_ENABLED=false to turn the trail off.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path

import config

_LOGS_DIR: Path = Path(__file__).resolve().parents[2] / "logs"


class StructuredLogger:
    """Thread-safe JSONL writer, one file per build session."""

    def __init__(self, logs_dir: Path | str | None = None, enabled: bool | None = None) -> None:
        self.logs_dir = Path(logs_dir) if logs_dir else _LOGS_DIR
        self.enabled = config.SESSION_LOG_ENABLED if enabled is None else enabled
        self._lock = threading.Lock()

    def path_for(self, session_id: str) -> Path:
        return self.logs_dir / f"{session_id}.jsonl"

    def log(self, session_id: str, event_type: str, payload: dict) -> None:
        """Append one record to ``<session_id>.jsonl``."""
        if not self.enabled:
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "session_id": session_id,
            "event_type": event_type,
            "payload": payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"
        with self._lock:
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            with open(self.path_for(session_id), "a", encoding="utf-8") as fh:
                fh.write(line)

    def read(self, session_id: str) -> list[dict]:
        """Return all records of one session, oldest first."""
        path = self.path_for(session_id)
        if not path.exists():
            return []
        with open(path, encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

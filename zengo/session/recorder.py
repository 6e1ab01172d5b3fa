"""
JSONL Session Recorder.

Hands finished sessions to the persistence boundary as structured JSON
lines, one file per session:

    <telemetry_dir>/sessions/2025-12-07_session_abc123def456.jsonl

Each line carries "ts", "session" and "type" ("session_end") plus the
board summary, the score result and the telemetry record.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from loguru import logger

from zengo.config import get_settings
from zengo.core.models import BoardContent, ResultEntry, ResultType, ScoreResult
from zengo.session.telemetry import TelemetryRecord


class SessionRecorder:
    """Writes finished sessions to JSONL files and reads them back."""

    EVENT_TYPE = "session_end"

    def __init__(self, log_dir: Path | None = None):
        """
        Initialize the recorder.

        Args:
            log_dir: Telemetry directory (default: settings.telemetry_dir)
        """
        self.log_dir = Path(log_dir) if log_dir is not None else get_settings().telemetry_dir
        self.sessions_dir = self.log_dir / "sessions"

    def record(
        self,
        content: BoardContent,
        result: ScoreResult,
        telemetry: TelemetryRecord | None = None,
        user_id: str | None = None,
        now: datetime | None = None,
    ) -> Path | None:
        """
        Append a finished session to a new session file.

        Returns:
            Path of the written file, or None if writing failed
        """
        now = now or datetime.now(UTC)
        session_id = uuid.uuid4().hex[:12]
        path = self.sessions_dir / f"{now.strftime('%Y-%m-%d')}_session_{session_id}.jsonl"

        event: dict[str, Any] = {
            "ts": now.isoformat(),
            "session": session_id,
            "type": self.EVENT_TYPE,
            "user_id": user_id,
            "level": content.difficulty_level,
            "language": content.language,
            "content": content.to_dict(),
            "result": result.to_dict(),
            "telemetry": telemetry.to_dict() if telemetry is not None else None,
        }

        try:
            self.sessions_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(json.dumps(event, default=str) + "\n")
        except OSError as e:
            logger.error(f"Failed to write session record: {e}")
            return None

        logger.debug(f"Session {session_id} recorded to {path}")
        return path

    def iter_events(self) -> Iterator[dict[str, Any]]:
        """Yield every recorded session event, oldest file first."""
        if not self.sessions_dir.exists():
            return
        for path in sorted(self.sessions_dir.glob("*.jsonl")):
            with open(path, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        yield json.loads(line)
                    except json.JSONDecodeError:
                        logger.warning(f"Skipping malformed line in {path.name}")

    def recent_results(self, limit: int = 20) -> list[ResultEntry]:
        """Most recent session results, newest first."""
        events = sorted(
            (e for e in self.iter_events() if e.get("type") == self.EVENT_TYPE),
            key=lambda e: e.get("ts", ""),
            reverse=True,
        )
        return [
            ResultEntry(
                level=e.get("level", ""),
                result_type=ResultType(e["result"]["result_type"]),
                score=e["result"].get("score"),
            )
            for e in events[:limit]
        ]

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path

from ..schema.models import FormResult

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path("data/runs.jsonl")


@dataclass
class RunRecord:
    timestamp: str
    page_id: str
    submitted: bool
    all_verified: bool
    verified_count: int
    field_count: int
    failed_fields: list[str] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_result(cls, result: FormResult) -> RunRecord:
        return cls(
            timestamp=datetime.now().isoformat(),
            page_id=result.page_id,
            submitted=result.submitted,
            all_verified=result.all_verified,
            verified_count=result.verified_count,
            field_count=len(result.outcomes),
            failed_fields=[o.field.label for o in result.failed_outcomes],
            error=result.error,
        )


class RunLogger:
    """Append-only JSONL log of page runs. Field values are never written."""

    def __init__(self, log_path: Path | None = None) -> None:
        self._log_path = log_path or DEFAULT_LOG_PATH
        self._lock = threading.Lock()

    @property
    def log_path(self) -> Path:
        return self._log_path

    def _ensure_directory(self) -> None:
        self._log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, result: FormResult) -> RunRecord:
        record = RunRecord.from_result(result)
        self._ensure_directory()
        line = json.dumps(asdict(record), default=str) + "\n"
        with self._lock:
            with open(self._log_path, "a", encoding="utf-8") as f:
                f.write(line)
        return record

    def read_all(self) -> list[RunRecord]:
        if not self._log_path.exists():
            return []

        records: list[RunRecord] = []
        with open(self._log_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(RunRecord(**json.loads(line)))
                except (json.JSONDecodeError, TypeError) as e:
                    logger.warning(f"Skipping malformed line {line_num}: {e}")
        return records

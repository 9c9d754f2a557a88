"""
File utilities for the roadmap workflow.

Persists generated roadmaps as one JSON document per record, grouped by user,
and provides the atomic write helpers shared by the renderers.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Iterable, List, Optional

from config import ReguflowConfig
from models import RoadmapRecord, RoadmapResult

logger = logging.getLogger(__name__)

RECORD_ID_PATTERN = re.compile(r"[0-9a-f]{32}")


def _atomic_write_text(path: Path, data: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=str(path.parent)) as tmp:
        tmp.write(data)
        tmp_name = tmp.name
    os.replace(tmp_name, path)


def write_text(path: Path, content: str) -> None:
    _atomic_write_text(path, content)


def write_json(path: Path, payload: Any) -> None:
    serialized = json.dumps(payload, indent=2, ensure_ascii=False)
    _atomic_write_text(path, serialized)


def _user_key(user_id: str) -> str:
    return hashlib.sha256(user_id.encode("utf-8")).hexdigest()


class RoadmapFileStore:
    """Record store keyed by user id, newest first on read."""

    def __init__(self, base_dir: str = ReguflowConfig.STORE_DIR):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _user_dir(self, user_id: str) -> Path:
        return self.base_dir / _user_key(user_id)

    def _record_path(self, user_id: str, record_id: str) -> Path:
        if not isinstance(record_id, str) or not RECORD_ID_PATTERN.fullmatch(record_id):
            raise KeyError(f"Invalid roadmap id {record_id!r}")
        return self._user_dir(user_id) / f"{record_id}.json"

    def _write(self, record: RoadmapRecord) -> None:
        payload = {
            "id": record.id,
            "user_id": record.user_id,
            "scenario": record.scenario,
            "data": record.data.to_payload(),
            "completed_tasks": list(record.completed_tasks),
            "created_at": record.created_at.isoformat(),
        }
        write_json(self._record_path(record.user_id, record.id), payload)

    def save(self, user_id: str, scenario: str, result: RoadmapResult,
             created_at: Optional[datetime] = None) -> RoadmapRecord:
        record = RoadmapRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            scenario=scenario,
            data=result,
            completed_tasks=[],
            created_at=created_at or datetime.now(timezone.utc),
        )
        self._write(record)
        logger.info(f"Saved roadmap {record.id} for user {user_id}")
        return record

    def get(self, user_id: str, record_id: str) -> RoadmapRecord:
        path = self._record_path(user_id, record_id)
        if not path.exists():
            raise KeyError(f"No roadmap {record_id} for user {user_id}")
        record = RoadmapRecord.model_validate(json.loads(path.read_text(encoding="utf-8")))
        if record.user_id != user_id or record.id != record_id:
            raise KeyError(f"No roadmap {record_id} for user {user_id}")
        return record

    def list_history(self, user_id: str, limit: Optional[int] = None) -> List[RoadmapRecord]:
        user_dir = self._user_dir(user_id)
        if not user_dir.exists():
            return []
        records: List[RoadmapRecord] = []
        for path in user_dir.glob("*.json"):
            try:
                record = RoadmapRecord.model_validate(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError) as exc:
                logger.warning(f"Skipping unreadable roadmap file {path.name}: {exc}")
                continue
            if record.user_id == user_id:
                records.append(record)
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit] if limit is not None else records

    def recent_scenarios(self, user_id: str, limit: Optional[int] = None) -> List[str]:
        limit = ReguflowConfig.HISTORY_LIMIT if limit is None else limit
        return [record.scenario for record in self.list_history(user_id, limit=max(limit, 0))]

    def update_completed_tasks(self, user_id: str, record_id: str,
                               completed_tasks: Iterable[str]) -> RoadmapRecord:
        record = self.get(user_id, record_id)
        updated = record.model_copy(update={"completed_tasks": list(completed_tasks)})
        self._write(updated)
        return updated

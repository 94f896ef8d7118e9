import json
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from focusloop.schemas.session import Session
from focusloop.schemas.snapshot import BackupExport
from focusloop.schemas.stats import UserStats
from focusloop.schemas.task import Task
from focusloop.services.stats_service import round_half_up
from focusloop.services.time_service import local_now

CSV_HEADERS = ["Date", "Type", "Category", "Duration (min)", "Task ID"]
CSV_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MISSING_TASK_ID = "N/A"


def export_to_csv(sessions: Iterable[Session]) -> str:
    """One row per session in log order, local timestamps, durations in whole minutes."""
    rows = [CSV_HEADERS]
    for s in sessions:
        rows.append(
            [
                s.completed_at.astimezone().strftime(CSV_DATE_FORMAT),
                s.type.value,
                s.category,
                str(round_half_up(s.duration / 60)),
                s.task_id or MISSING_TASK_ID,
            ]
        )
    return "\n".join(",".join(row) for row in rows)


def export_to_json(data: Any) -> str:
    if isinstance(data, BackupExport):
        data = data.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def build_backup(
    tasks: Sequence[Task],
    sessions: Sequence[Session],
    stats: UserStats,
    now: datetime | None = None,
) -> BackupExport:
    return BackupExport(
        tasks=list(tasks),
        sessions=list(sessions),
        stats=stats,
        exported_at=now or local_now(),
    )


def parse_backup(payload: dict | str | bytes) -> BackupExport:
    """Validate an exported backup.

    Missing or null collections fall back to empty lists and missing stats to
    the initial stats. Raises pydantic.ValidationError on malformed entries.
    """
    if isinstance(payload, (str, bytes)):
        payload = json.loads(payload)
    if not isinstance(payload, dict):
        raise ValueError("Backup must be a JSON object")
    data = {
        "tasks": payload.get("tasks") or [],
        "sessions": payload.get("sessions") or [],
        "stats": payload.get("stats") or {},
        "exportedAt": payload.get("exportedAt"),
    }
    return BackupExport.model_validate(data)

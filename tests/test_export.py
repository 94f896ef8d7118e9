import json

import pytest
from pydantic import ValidationError

from focusloop.schemas.session import SessionType
from focusloop.schemas.stats import UserStats
from focusloop.schemas.task import Task
from focusloop.services.export_service import (
    CSV_HEADERS,
    build_backup,
    export_to_csv,
    export_to_json,
    parse_backup,
)


def test_csv_header_only_for_empty_log():
    assert export_to_csv([]) == "Date,Type,Category,Duration (min),Task ID"


def test_csv_rows(make_session):
    sessions = [
        make_session(hour=9, duration=1500, category="work", task_id="task-1"),
        make_session(hour=10, type=SessionType.SHORT_BREAK, duration=290, category="personal"),
    ]

    lines = export_to_csv(sessions).split("\n")

    assert lines[0] == ",".join(CSV_HEADERS)
    date_prefix = sessions[0].completed_at.strftime("%Y-%m-%d")
    assert lines[1] == f"{date_prefix} 09:00:00,focus,work,25,task-1"
    assert lines[2] == f"{date_prefix} 10:00:00,shortBreak,personal,5,N/A"
    assert len(lines) == 3


def test_csv_duration_rounds_half_up(make_session):
    row = export_to_csv([make_session(duration=90)]).split("\n")[1]
    assert row.split(",")[3] == "2"


def test_json_backup_is_pretty_printed(now, make_session):
    backup = build_backup([], [make_session()], UserStats(total_pomodoros=1), now=now)

    text = export_to_json(backup)
    data = json.loads(text)

    assert text.startswith("{\n  ")
    assert set(data) == {"tasks", "sessions", "stats", "exportedAt"}
    assert data["stats"]["totalPomodoros"] == 1
    assert data["sessions"][0]["completedAt"]


def test_parse_backup_defaults_missing_fields():
    backup = parse_backup({})
    assert backup.tasks == []
    assert backup.sessions == []
    assert backup.stats == UserStats()


def test_parse_backup_accepts_null_collections():
    backup = parse_backup('{"tasks": null, "sessions": null, "stats": null}')
    assert backup.tasks == []
    assert backup.stats == UserStats()


def test_parse_backup_round_trip(now, make_session):
    task = Task(title="Write report", created_at=now)
    session = make_session(task_id=task.id)
    original = build_backup([task], [session], UserStats(xp=40), now=now)

    restored = parse_backup(export_to_json(original))

    assert restored == original


def test_parse_backup_rejects_malformed_entries():
    with pytest.raises(ValidationError):
        parse_backup({"tasks": [{"title": ""}]})


def test_parse_backup_rejects_non_object():
    with pytest.raises(ValueError):
        parse_backup("[1, 2, 3]")

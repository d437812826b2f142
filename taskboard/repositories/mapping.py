"""
Translation between board entities and relational rows.

Entity (camelCase в JSON)          Row (snake_case)
-------------------------          ----------------
createdAt: epoch millis     <->    created_at: UTC timestamp (ISO-8601 на проводе)
columnId                    <->    column_id
(нет)                       <->    owner_id
order: None                 ->     order: 0
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from ..models import ColumnRow, TaskRow
from ..schemas import Column, Comment, Priority, Task, now_millis

EPOCH = datetime(1970, 1, 1)
ONE_MILLISECOND = timedelta(milliseconds=1)


def millis_to_datetime(millis: int) -> datetime:
    """Epoch millis -> naive UTC datetime (exact, no float rounding)."""
    return EPOCH + timedelta(milliseconds=millis)


def datetime_to_millis(value: datetime | str | None) -> int:
    """
    UTC timestamp -> epoch millis.

    Принимает datetime (naive = UTC) или ISO-8601 строку,
    например "2026-10-19T08:30:00.123Z". None -> текущее время.
    """
    if value is None:
        return now_millis()
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return (value - EPOCH) // ONE_MILLISECOND


def task_to_row(task: Task, owner_id: str) -> dict[str, Any]:
    return {
        "id": task.id,
        "owner_id": owner_id,
        "title": task.title,
        "description": task.description,
        "created_at": millis_to_datetime(task.created_at),
        "points": task.points,
        "tags": list(task.tags),
        "column_id": task.column_id,
        "priority": Priority(task.priority).value,
        "comments": [comment.to_document() for comment in task.comments],
        "order": task.order or 0,
    }


def task_from_row(row: TaskRow) -> Task:
    return Task(
        id=row.id,
        title=row.title,
        description=row.description or "",
        created_at=datetime_to_millis(row.created_at),
        points=row.points or 0,
        tags=row.tags or [],
        column_id=row.column_id,
        priority=row.priority or Priority.MEDIUM,
        comments=[Comment.model_validate(item) for item in row.comments or []],
        order=row.order or 0,
    )


def column_to_row(column: Column, owner_id: str, order: int | None = None) -> dict[str, Any]:
    return {
        "id": column.id,
        "owner_id": owner_id,
        "name": column.name,
        "color": column.color,
        "order": column.order if order is None else order,
    }


def column_from_row(row: ColumnRow) -> Column:
    return Column(id=row.id, name=row.name, color=row.color, order=row.order or 0)

"""
Order normalization and reorder algorithms.

Всё здесь синхронное и чистое: функции получают списки сущностей и
возвращают новые списки (исходные объекты не мутируются, изменённые
копируются через model_copy). Запись в хранилище - забота BoardSyncContext.
"""

from collections.abc import Sequence
from typing import TypeVar

from ..schemas import Column, Task

OrderedT = TypeVar("OrderedT", Task, Column)


def _position_key(task: Task) -> tuple[int, int, int]:
    # Задачи с order - первыми (по order, при дубликатах - по created_at),
    # задачи без order - следом, по created_at
    if task.order is None:
        return (1, task.created_at, 0)
    return (0, task.order, task.created_at)


def normalize_task_order(tasks: Sequence[Task]) -> tuple[list[Task], list[Task]]:
    """
    Repair per-column task order into a dense 0..n-1 sequence.

    Args:
        tasks: Tasks as read from storage (order may be missing, duplicated or sparse)

    Returns:
        (normalized, changed): all tasks grouped by column in first-appearance
        order, and the subset whose stored order differs from the new one.

    Пример:
        col-1: [A(order=0), B(order=5), C(order=None)] -> [A=0, B=1, C=2], changed=[B, C]

    Нормализация идемпотентна: повторный прогон на результате ничего не меняет.
    """
    groups: dict[str, list[Task]] = {}
    for task in tasks:
        groups.setdefault(task.column_id, []).append(task)

    normalized: list[Task] = []
    changed: list[Task] = []
    for column_tasks in groups.values():
        for index, task in enumerate(sorted(column_tasks, key=_position_key)):
            if task.order != index:
                task = task.model_copy(update={"order": index})
                changed.append(task)
            normalized.append(task)

    return normalized, changed


def tasks_in_column(tasks: Sequence[Task], column_id: str) -> list[Task]:
    """Tasks of one column sorted by position."""
    return sorted((task for task in tasks if task.column_id == column_id), key=_position_key)


def next_order(tasks: Sequence[Task], column_id: str) -> int:
    """max(order) + 1 among the column's tasks, 0 for an empty column."""
    orders = [task.order for task in tasks if task.column_id == column_id and task.order is not None]
    return max(orders) + 1 if orders else 0


def reorder(items: Sequence[OrderedT], source_index: int, target_index: int) -> list[OrderedT] | None:
    """
    Move one item inside an ordered group and reassign order to positions.

    Returns:
        New list with order == index for every item, or None if an index is out of range

    Пример (order [0,1,2,3], переносим индекс 3 на индекс 1):
        [A, B, C, D] -> [A, D, B, C]
    """
    if not (0 <= source_index < len(items) and 0 <= target_index < len(items)):
        return None

    reordered = list(items)
    moved = reordered.pop(source_index)
    reordered.insert(target_index, moved)

    return [
        item if item.order == index else item.model_copy(update={"order": index})
        for index, item in enumerate(reordered)
    ]


def move_before(items: Sequence[OrderedT], dragged_id: str, target_id: str) -> list[OrderedT] | None:
    """
    Drag-and-drop within a group: put the dragged item at the target's index.

    Returns None (no-op) when dragged and target are the same item,
    or either id is not in the group.
    """
    if dragged_id == target_id:
        return None

    ids = [item.id for item in items]
    if dragged_id not in ids or target_id not in ids:
        return None

    return reorder(items, ids.index(dragged_id), ids.index(target_id))


def changed_order(before: Sequence[OrderedT], after: Sequence[OrderedT]) -> list[OrderedT]:
    """Items of `after` whose order differs from the same id in `before`."""
    previous = {item.id: item.order for item in before}
    return [item for item in after if previous.get(item.id) != item.order]


def move_to_column(
    tasks: Sequence[Task], task_id: str, target_column_id: str
) -> tuple[list[Task], Task] | None:
    """
    Cross-column move: append the task to the end of the target column.

    Returns:
        (all tasks with the moved one replaced, the moved task), or None if the
        task is unknown or already in the target column.

    Исходная колонка остаётся с "дыркой" в order - её закроет нормализатор
    при следующем refresh.
    """
    task = next((item for item in tasks if item.id == task_id), None)
    if task is None or task.column_id == target_column_id:
        return None

    moved = task.model_copy(
        update={"column_id": target_column_id, "order": next_order(tasks, target_column_id)}
    )
    return [moved if item.id == task_id else item for item in tasks], moved

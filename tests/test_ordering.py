"""
Тесты для нормализатора порядка и алгоритмов перестановки.

Проверяем:
- плотный порядок 0..n-1 в каждой колонке после нормализации
- идемпотентность нормализации
- перестановку внутри колонки и перенос между колонками
"""

from taskboard.services import move_before, move_to_column, next_order, normalize_task_order, reorder
from taskboard.services.ordering import changed_order

from .factories import make_column, make_task


def _orders(tasks, column_id="col-1"):
    return {task.id: task.order for task in tasks if task.column_id == column_id}


# ============================================================================
# NORMALIZER
# ============================================================================


def test_normalize_sparse_and_missing_orders():
    """Test: [A=0, B=5, C=None] -> [A=0, B=1, C=2], изменились только B и C."""
    tasks = [
        make_task("a", order=0, created_at=1),
        make_task("b", order=5, created_at=2),
        make_task("c", order=None, created_at=3),
    ]

    normalized, changed = normalize_task_order(tasks)

    assert [task.id for task in normalized] == ["a", "b", "c"]
    assert [task.order for task in normalized] == [0, 1, 2]
    assert sorted(task.id for task in changed) == ["b", "c"]


def test_normalize_duplicates_break_ties_by_created_at():
    tasks = [
        make_task("late", order=1, created_at=200),
        make_task("early", order=1, created_at=100),
        make_task("first", order=0, created_at=300),
    ]

    normalized, _ = normalize_task_order(tasks)

    assert [task.id for task in normalized] == ["first", "early", "late"]
    assert [task.order for task in normalized] == [0, 1, 2]


def test_normalize_tasks_without_order_go_last_by_created_at():
    tasks = [
        make_task("no-order-new", order=None, created_at=50),
        make_task("no-order-old", order=None, created_at=10),
        make_task("ordered", order=7, created_at=999),
    ]

    normalized, _ = normalize_task_order(tasks)

    assert [task.id for task in normalized] == ["ordered", "no-order-old", "no-order-new"]


def test_normalize_per_column_groups_in_first_appearance_order():
    tasks = [
        make_task("b1", column_id="col-2", order=3),
        make_task("a1", column_id="col-1", order=9),
        make_task("b2", column_id="col-2", order=1),
    ]

    normalized, _ = normalize_task_order(tasks)

    assert [task.id for task in normalized] == ["b2", "b1", "a1"]
    assert _orders(normalized, "col-2") == {"b2": 0, "b1": 1}
    assert _orders(normalized, "col-1") == {"a1": 0}


def test_normalize_is_idempotent():
    tasks = [make_task(str(i), order=order) for i, order in enumerate([4, None, 4, 10])]

    once, _ = normalize_task_order(tasks)
    twice, changed = normalize_task_order(once)

    assert changed == []
    assert twice == once


def test_normalize_does_not_mutate_input():
    task = make_task("a", order=5)

    normalize_task_order([task])

    assert task.order == 5


def test_normalize_empty():
    assert normalize_task_order([]) == ([], [])


# ============================================================================
# REORDER
# ============================================================================


def test_reorder_moves_item_and_reassigns_orders():
    """Test: перенос индекса 3 на индекс 1: [A, B, C, D] -> [A, D, B, C]."""
    tasks = [make_task(task_id, order=i) for i, task_id in enumerate("abcd")]

    reordered = reorder(tasks, 3, 1)

    assert [task.id for task in reordered] == ["a", "d", "b", "c"]
    assert [task.order for task in reordered] == [0, 1, 2, 3]
    assert sorted(task.id for task in changed_order(tasks, reordered)) == ["b", "c", "d"]


def test_reorder_out_of_range_is_noop():
    tasks = [make_task("a", order=0)]

    assert reorder(tasks, 0, 1) is None
    assert reorder(tasks, -1, 0) is None


def test_reorder_columns():
    columns = [make_column("c1", 0), make_column("c2", 1), make_column("c3", 2)]

    reordered = reorder(columns, 0, 2)

    assert [column.id for column in reordered] == ["c2", "c3", "c1"]
    assert [column.order for column in reordered] == [0, 1, 2]


def test_move_before_same_item_or_unknown_id_is_noop():
    tasks = [make_task("a", order=0), make_task("b", order=1)]

    assert move_before(tasks, "a", "a") is None
    assert move_before(tasks, "a", "zzz") is None
    assert move_before(tasks, "zzz", "a") is None


def test_move_before_takes_target_position():
    tasks = [make_task(task_id, order=i) for i, task_id in enumerate("abc")]

    reordered = move_before(tasks, "a", "c")

    assert [task.id for task in reordered] == ["b", "c", "a"]


# ============================================================================
# MOVE BETWEEN COLUMNS
# ============================================================================


def test_next_order():
    tasks = [make_task("a", order=0), make_task("b", order=4), make_task("c", column_id="col-2", order=9)]

    assert next_order(tasks, "col-1") == 5
    assert next_order(tasks, "col-3") == 0


def test_move_to_column_appends_to_target():
    tasks = [
        make_task("a", order=0),
        make_task("b", order=1),
        make_task("x", column_id="col-2", order=0),
        make_task("y", column_id="col-2", order=1),
    ]

    tasks_after, moved = move_to_column(tasks, "a", "col-2")

    assert moved.column_id == "col-2"
    assert moved.order == 2
    assert [task.id for task in tasks_after] == ["a", "b", "x", "y"]
    assert tasks_after[0] is moved
    # В исходной колонке остаётся "дырка" до следующей нормализации
    assert _orders(tasks_after, "col-1") == {"b": 1}


def test_move_to_empty_column_gets_order_zero():
    tasks = [make_task("a", order=3)]

    _, moved = move_to_column(tasks, "a", "col-9")

    assert moved.order == 0


def test_move_to_same_column_or_unknown_task_is_noop():
    tasks = [make_task("a", order=0)]

    assert move_to_column(tasks, "a", "col-1") is None
    assert move_to_column(tasks, "zzz", "col-2") is None

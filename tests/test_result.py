"""Тесты для Result / ErrorInfo / BatchResult и последовательных пачек записей."""

import pytest

from taskboard.core.result import BatchResult, ErrorInfo, ErrorKind, Result
from taskboard.services import BatchStep, run_batch


def _backend_error(message: str = "boom") -> ErrorInfo:
    return ErrorInfo(ErrorKind.BACKEND, message)


# ============================================================================
# RESULT
# ============================================================================


def test_success_with_data():
    """Test: успешный результат несёт данные и не несёт ошибку."""
    result = Result.success([1, 2])

    assert result.ok
    assert result.data == [1, 2]
    assert result.error is None


def test_success_without_data_is_not_found_or_void():
    """Test: Result(None, None) - успех без данных (delete, поиск по id без результата)."""
    result = Result.success()

    assert result.ok
    assert result.data is None


def test_failure_has_no_data():
    result = Result.failure(_backend_error())

    assert not result.ok
    assert result.data is None
    assert result.error.kind == ErrorKind.BACKEND


def test_data_and_error_are_mutually_exclusive():
    """Test: одновременно data и error - ошибка программиста."""
    with pytest.raises(ValueError):
        Result(data="task", error=_backend_error())


def test_error_info_from_exception():
    exc = OSError("disk full")
    error = ErrorInfo.from_exception(exc)

    assert error.kind == ErrorKind.BACKEND
    assert error.message == "disk full"
    assert error.cause is exc
    assert str(error) == "disk full"


def test_error_info_from_exception_without_message_uses_type_name():
    error = ErrorInfo.from_exception(ValueError(), ErrorKind.VALIDATION)

    assert error.kind == ErrorKind.VALIDATION
    assert error.message == "ValueError"


def test_batch_result_partial_flag():
    assert not BatchResult(applied=["a"]).partial
    assert not BatchResult(pending=["a"], error=_backend_error()).partial
    assert BatchResult(applied=["a"], pending=["b"], error=_backend_error()).partial


# ============================================================================
# RUN BATCH
# ============================================================================


def _step(item: str, written: list[str], fail: bool = False) -> BatchStep[str]:
    async def write() -> Result[str]:
        if fail:
            return Result.failure(_backend_error(f"cannot write {item}"))
        written.append(item)
        return Result.success(item)

    return BatchStep(item, write)


@pytest.mark.asyncio
async def test_run_batch_all_succeed():
    written: list[str] = []
    batch = await run_batch([_step("a", written), _step("b", written), _step("c", written)])

    assert batch.ok
    assert batch.applied == ["a", "b", "c"]
    assert batch.pending == []
    assert written == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_run_batch_stops_on_first_failure():
    """Test: после первой ошибки записи не выполняются, applied/pending видны вызывающему."""
    written: list[str] = []
    batch = await run_batch(
        [_step("a", written), _step("b", written, fail=True), _step("c", written)]
    )

    assert not batch.ok
    assert batch.partial
    assert batch.applied == ["a"]
    assert batch.pending == ["b", "c"]
    assert written == ["a"]

    assert batch.error.kind == ErrorKind.PARTIAL_BATCH
    assert "Stopped after 1 of 3 writes" in batch.error.message
    assert "cannot write b" in batch.error.message
    assert batch.error.details[0] == ErrorKind.BACKEND.value


@pytest.mark.asyncio
async def test_run_batch_failure_before_any_write_keeps_original_kind():
    written: list[str] = []
    batch = await run_batch([_step("a", written, fail=True), _step("b", written)])

    assert not batch.partial
    assert batch.error.kind == ErrorKind.BACKEND
    assert batch.applied == []
    assert batch.pending == ["a", "b"]


@pytest.mark.asyncio
async def test_run_batch_empty():
    batch = await run_batch([])

    assert batch.ok
    assert batch.applied == []

"""Sequential batch writes that stop on the first failure."""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..core.result import BatchResult, ErrorInfo, ErrorKind, Result

T = TypeVar("T")


@dataclass(frozen=True)
class BatchStep(Generic[T]):
    """One write of a batch: the item it concerns and the call that persists it."""

    item: T
    write: Callable[[], Awaitable[Result[Any]]]


async def run_batch(steps: Sequence[BatchStep[T]]) -> BatchResult[T]:
    """
    Run writes one after another; stop at the first failed Result.

    Если до ошибки что-то уже записалось, ошибка получает kind=partial_batch
    (исходная причина - в details), чтобы вызывающий код видел смешанное состояние.
    """
    batch: BatchResult[T] = BatchResult()

    for index, step in enumerate(steps):
        result = await step.write()
        if result.ok:
            batch.applied.append(step.item)
            continue

        batch.pending = [pending.item for pending in steps[index:]]
        if batch.applied:
            batch.error = ErrorInfo(
                kind=ErrorKind.PARTIAL_BATCH,
                message=(
                    f"Stopped after {len(batch.applied)} of {len(steps)} writes: "
                    f"{result.error.message}"
                ),
                details=[result.error.kind.value, *result.error.details],
                cause=result.error.cause,
            )
        else:
            batch.error = result.error
        break

    return batch

"""Uniform success/failure envelope returned by every repository operation."""

import enum
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Error categories reported through Result."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    BACKEND = "backend"
    CONNECTIVITY = "connectivity"
    PARTIAL_BATCH = "partial_batch"


@dataclass(frozen=True)
class ErrorInfo:
    """Описание ошибки операции (вместо выброшенного исключения)."""

    kind: ErrorKind
    message: str
    details: list[str] = field(default_factory=list)
    cause: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, exc: BaseException, kind: ErrorKind = ErrorKind.BACKEND) -> "ErrorInfo":
        return cls(kind=kind, message=str(exc) or type(exc).__name__, cause=exc)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Результат операции репозитория.

    Инварианты:
    - data и error никогда не заполнены одновременно
    - error is None означает успех
    - data is None and error is None - успех без данных
      (delete, или поиск по id, который ничего не нашёл)

    Пример:
        result = await provider.tasks.get_task_by_id("task-1")
        if not result.ok:
            logger.warning(result.error.message)
        elif result.data is None:
            ...  # не найдено - это не ошибка
    """

    data: T | None = None
    error: ErrorInfo | None = None

    def __post_init__(self) -> None:
        if self.data is not None and self.error is not None:
            raise ValueError("Result cannot carry both data and error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T | None = None) -> "Result[T]":
        return cls(data=data, error=None)

    @classmethod
    def failure(cls, error: ErrorInfo) -> "Result[T]":
        return cls(data=None, error=error)


@dataclass
class BatchResult(Generic[T]):
    """
    Outcome of a sequential multi-write operation that stops on the first failure.

    Частично применённое состояние не прячется внутри одного Result:
    - applied: что уже записано
    - pending: что не записано (первым идёт элемент, на котором упали)
    - error: первая ошибка (None если всё прошло)

    Вызывающий код сам решает, повторять ли pending.
    """

    applied: list[T] = field(default_factory=list)
    pending: list[T] = field(default_factory=list)
    error: ErrorInfo | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def partial(self) -> bool:
        """True when some writes landed before the failure."""
        return self.error is not None and bool(self.applied)

"""
Обработчики ошибок (Exception Handlers) для API.

Сервисный слой не бросает исключения - он возвращает Result/BatchResult.
Endpoint превращает неуспешный результат в ResultError, а handler
отдаёт его в едином формате:

    {"error": {"code": "NOT_FOUND", "message": "...", "details": [...]}}
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.logging import get_logger
from ..core.result import ErrorInfo, ErrorKind
from .schemas import ErrorBody, ErrorDetail, ErrorResponse

logger = get_logger(__name__)

# ErrorKind -> (HTTP статус, код ошибки)
ERROR_KIND_STATUS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.VALIDATION: (status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    ErrorKind.PARTIAL_BATCH: (status.HTTP_409_CONFLICT, "PARTIAL_BATCH"),
    ErrorKind.BACKEND: (status.HTTP_503_SERVICE_UNAVAILABLE, "BACKEND_ERROR"),
    ErrorKind.CONNECTIVITY: (status.HTTP_503_SERVICE_UNAVAILABLE, "CONNECTIVITY_ERROR"),
}


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class APIError(Exception):
    """
    Базовый класс для всех API ошибок.

    Использование:
        raise APIError(code="NOT_FOUND", message="Task task-1 not found", status_code=404)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: list[dict] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """
    Сущность не найдена (404).

    Использование:
        raise NotFoundError("Task", "task-1")
        # Сообщение: "Task task-1 not found"
    """

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} {resource_id} not found",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class BadRequestError(APIError):
    """Запрос корректен по схеме, но не имеет смысла для текущей доски (400)."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=[{"field": "body", "message": item} for item in details] if details else None,
        )


class ResultError(APIError):
    """
    Неуспешный Result из сервисного слоя.

    Статус выбирается по ErrorKind (см. ERROR_KIND_STATUS),
    ErrorInfo.details уходят клиенту как details.
    """

    def __init__(self, error: ErrorInfo):
        status_code, code = ERROR_KIND_STATUS.get(
            error.kind, (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")
        )
        super().__init__(
            code=code,
            message=error.message,
            status_code=status_code,
            details=[{"field": error.kind.value, "message": item} for item in error.details] or None,
        )
        self.error = error


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Преобразует APIError в единый формат ErrorResponse."""
    logger.warning(
        f"API Error: {exc.code} - {exc.message}",
        extra={"path": request.url.path, "status": exc.status_code},
    )

    details = None
    if exc.details:
        details = [ErrorDetail(field=d["field"], message=d["message"]) for d in exc.details]

    error_response = ErrorResponse(error=ErrorBody(code=exc.code, message=exc.message, details=details))
    return JSONResponse(status_code=exc.status_code, content=error_response.model_dump())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Ошибки валидации тела запроса (422) в нашем формате.

    loc ["body", "columnId"] -> field "columnId"
    """
    logger.warning("Validation Error", extra={"path": request.url.path, "errors": len(exc.errors())})

    details = []
    for error in exc.errors():
        field_path = error.get("loc", [])
        field_name = field_path[-1] if field_path else "unknown"
        if len(field_path) > 1 and field_path[0] == "body":
            field_name = ".".join(str(p) for p in field_path[1:])

        details.append(ErrorDetail(field=str(field_name), message=error.get("msg", "Invalid value")))

    error_response = ErrorResponse(
        error=ErrorBody(code="VALIDATION_ERROR", message="Request validation failed", details=details)
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Регистрирует error handlers в приложении FastAPI.

    Вызывается из main.py:
        from taskboard.api.errors import register_error_handlers
        register_error_handlers(app)
    """
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    logger.info("Error handlers registered")

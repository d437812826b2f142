"""
Главный файл FastAPI приложения.

Запуск:
    uvicorn taskboard.main:app --reload

API документация:
    http://localhost:8000/docs       - Swagger UI
    http://localhost:8000/redoc      - ReDoc

Backend выбирается переменной BOARD_BACKEND (embedded / relational / memory).
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from . import __version__
from .api import board_router, columns_router, tasks_router
from .api.dependencies import verify_api_key
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .core.config import settings
from .core.logging import get_logger, setup_logging
from .providers import create_provider
from .services import BoardSyncContext

setup_logging(
    log_level=settings.LOG_LEVEL,
    log_format=settings.LOG_FORMAT,
    sql_echo=settings.DATABASE_ECHO,
)

logger = get_logger(__name__)

APP_START_TIME: float = 0.0

# ============================================================================
# RATE LIMITER SETUP
# ============================================================================

limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Превышение лимита запросов в едином формате ErrorResponse."""
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Too many requests. Limit: {exc.detail}",
                "details": [{"field": "rate_limit", "message": str(exc.detail)}],
            }
        },
    )


# ============================================================================
# LIFESPAN EVENT HANDLER
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: provider по конфигурации -> BoardSyncContext -> начальная загрузка.
    Shutdown: дождаться фоновых записей и отключить provider.

    Ошибка подключения не роняет приложение: она лежит в board.error
    и видна в /health.
    """
    global APP_START_TIME
    APP_START_TIME = time.time()

    board = BoardSyncContext(create_provider(settings))
    await board.start()
    app.state.board = board

    logger.info(
        "Application started",
        extra={
            "app_name": settings.APP_NAME,
            "version": __version__,
            "provider": board.provider.name,
            "columns": len(board.columns),
            "tasks": len(board.tasks),
        },
    )

    yield

    await board.close()
    app.state.board = None

    uptime = int(time.time() - APP_START_TIME)
    logger.info("Application stopped", extra={"uptime_seconds": uptime})


# ============================================================================
# CREATE APPLICATION
# ============================================================================

app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="""
    Синхронизация канбан-доски с выбранным хранилищем.

    ## Возможности

    * **Задачи** - CRUD, перенос между колонками, порядок внутри колонки
    * **Колонки** - CRUD, порядок колонок, каскадное удаление задач по флагу
    * **Доска** - тема, экспорт и импорт JSON

    ## Хранилища

    * `embedded` - локальный JSON файл
    * `relational` - удалённая БД (PostgreSQL через asyncpg)
    * `memory` - только в памяти

    ## Ошибки

    Неуспешная запись в хранилище - 503, частично выполненная пачка записей - 409.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.state.limiter = limiter
app.state.board = None
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

# ============================================================================
# MIDDLEWARE
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# ============================================================================
# ROUTERS
# ============================================================================

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(tasks_router)
api_v1_router.include_router(columns_router)
api_v1_router.include_router(board_router)

app.include_router(api_v1_router, dependencies=[Depends(verify_api_key)])

register_error_handlers(app)


# ============================================================================
# ROOT / HEALTH
# ============================================================================


@app.get("/", tags=["root"], summary="Root endpoint")
@limiter.limit("100/minute")
async def root(request: Request):
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "api_version": "v1",
        "docs": "/docs",
        "endpoints": {
            "tasks": "/api/v1/tasks",
            "columns": "/api/v1/columns",
            "board": "/api/v1/board",
        },
        "rate_limit": "100 requests/minute",
    }


@app.get("/health", tags=["health"], summary="Health check")
@limiter.limit("100/minute")
async def health_check(request: Request):
    """
    Состояние provider и последняя ошибка контекста.

    Пример ответа (200 OK):
    ```json
    {
        "status": "ok",
        "checks": {"provider": "relational", "error": null, "version": "1.0.0", "uptime_seconds": 3600},
        "timestamp": "2026-10-19T12:00:00+00:00"
    }
    ```

    Если последняя загрузка или подключение упали - 503 и status="error".
    """
    board: BoardSyncContext | None = request.app.state.board
    uptime_seconds = int(time.time() - APP_START_TIME) if APP_START_TIME > 0 else 0

    error = None
    if board is None:
        error = "Board is not initialized"
    elif board.error is not None:
        error = str(board.error)

    checks = {
        "provider": board.provider.name if board is not None else None,
        "error": error,
        "version": __version__,
        "uptime_seconds": uptime_seconds,
    }
    overall_status = "ok" if error is None else "error"

    return JSONResponse(
        status_code=200 if overall_status == "ok" else 503,
        content={
            "status": overall_status,
            "checks": checks,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )

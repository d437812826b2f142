"""
Dependencies для FastAPI endpoints.

BoardSyncContext создаётся один раз в lifespan (main.py) и лежит
в app.state.board. Endpoints получают его через Depends(get_board);
в тестах зависимость подменяется через app.dependency_overrides.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from ..core.config import settings
from ..core.result import BatchResult, Result
from ..services import BoardSyncContext
from .errors import ResultError

# ============================================================================
# API KEY AUTHENTICATION
# ============================================================================

api_key_header = APIKeyHeader(
    name="X-API-Key",
    auto_error=False,
    description="API ключ для авторизации. Передавайте в заголовке X-API-Key",
)


async def verify_api_key(api_key: str = Depends(api_key_header)) -> str:
    """
    Проверка заголовка X-API-Key.

    Пример запроса:
        curl -H "X-API-Key: your-secret-key" http://localhost:8000/api/v1/board
    """
    if api_key is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key is missing. Add header: X-API-Key: your-key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if api_key != settings.API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


# ============================================================================
# BOARD CONTEXT DEPENDENCY
# ============================================================================


async def get_board(request: Request) -> BoardSyncContext:
    """
    Dependency для BoardSyncContext.

    Raises:
        HTTPException 503: приложение запущено без lifespan (контекст не создан)
    """
    board = getattr(request.app.state, "board", None)
    if board is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Board is not initialized",
        )
    return board


def unwrap(result: Result):
    """Return the payload of a successful Result or raise ResultError."""
    if not result.ok:
        raise ResultError(result.error)
    return result.data


def ensure_applied(batch: BatchResult) -> BatchResult:
    """Raise ResultError for a failed batch (PARTIAL_BATCH -> 409)."""
    if not batch.ok:
        raise ResultError(batch.error)
    return batch

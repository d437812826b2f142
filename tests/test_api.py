"""
Тесты для API Layer (REST endpoints).

Проверяем:
- HTTP статус-коды
- Форматы запросов/ответов (JSON, camelCase)
- Обработку ошибок (400, 401, 404, 409, 422, 503)
- Интеграцию слоёв (API -> BoardSyncContext -> memory provider)
"""

import json
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

from taskboard.api.dependencies import get_board
from taskboard.core.config import settings
from taskboard.main import app
from taskboard.services import BoardSyncContext

from .factories import FlakyProvider, make_column


@asynccontextmanager
async def client_for(board: BoardSyncContext):
    """HTTP клиент поверх произвольного контекста доски (например, с flaky provider)."""
    app.dependency_overrides[get_board] = lambda: board
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers={"X-API-Key": settings.API_KEY},
        ) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


async def create_column(client: AsyncClient, name: str = "To Do") -> dict:
    response = await client.post("/api/v1/columns", json={"name": name, "color": "oklch(0.45 0.15 285)"})
    assert response.status_code == 201
    return response.json()


async def create_task(client: AsyncClient, column_id: str, title: str = "Task") -> dict:
    response = await client.post("/api/v1/tasks", json={"columnId": column_id, "title": title})
    assert response.status_code == 201
    return response.json()


# ============================================================================
# AUTH / ROOT / HEALTH
# ============================================================================


@pytest.mark.asyncio
async def test_api_key_required(test_client: AsyncClient):
    """Test: без X-API-Key - 401."""
    response = await test_client.get("/api/v1/tasks", headers={"X-API-Key": ""})
    assert response.status_code == 401

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as anonymous:
        response = await anonymous.get("/api/v1/tasks")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_root(test_client: AsyncClient):
    response = await test_client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["board"] == "/api/v1/board"


@pytest.mark.asyncio
async def test_health_ok(test_client: AsyncClient):
    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["checks"]["provider"] == "memory"
    assert data["checks"]["error"] is None
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_health_reports_context_error(test_client: AsyncClient):
    flaky = FlakyProvider()
    flaky.unreachable = True
    broken = BoardSyncContext(flaky)
    await broken.start()
    app.state.board = broken

    response = await test_client.get("/health")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "error"
    assert data["checks"]["provider"] == "flaky"
    assert "connection refused" in data["checks"]["error"]


# ============================================================================
# TASKS
# ============================================================================


@pytest.mark.asyncio
async def test_create_and_list_tasks(test_client: AsyncClient):
    """Test: POST /tasks - задача в конце колонки, ответ в camelCase."""
    column = await create_column(test_client)

    response = await test_client.post(
        "/api/v1/tasks",
        json={
            "columnId": column["id"],
            "title": "Player jump animation",
            "points": 3,
            "tags": ["Art"],
            "priority": "high",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["columnId"] == column["id"]
    assert data["order"] == 0
    assert data["priority"] == "high"
    assert "createdAt" in data

    await create_task(test_client, column["id"], "Second")
    response = await test_client.get("/api/v1/tasks", params={"columnId": column["id"]})
    assert [task["order"] for task in response.json()] == [0, 1]


@pytest.mark.asyncio
async def test_create_task_validation_error(test_client: AsyncClient):
    """Test: пустой title - 422 в едином формате ErrorResponse."""
    column = await create_column(test_client)

    response = await test_client.post("/api/v1/tasks", json={"columnId": column["id"], "title": ""})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "title" in [detail["field"] for detail in error["details"]]


@pytest.mark.asyncio
async def test_create_task_in_unknown_column(test_client: AsyncClient):
    response = await test_client.post("/api/v1/tasks", json={"columnId": "nope", "title": "Orphan"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_get_task(test_client: AsyncClient):
    column = await create_column(test_client)
    task = await create_task(test_client, column["id"])

    response = await test_client.get(f"/api/v1/tasks/{task['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == task["id"]

    response = await test_client.get("/api/v1/tasks/missing")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_update_task_partial(test_client: AsyncClient):
    column = await create_column(test_client)
    task = await create_task(test_client, column["id"], "Draft")

    response = await test_client.put(
        f"/api/v1/tasks/{task['id']}",
        json={
            "title": "Final",
            "comments": [{"id": "c-1", "text": "Nice", "createdAt": 1760862000000, "author": "Ann"}],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Final"
    assert data["columnId"] == column["id"]
    assert data["comments"][0]["author"] == "Ann"


@pytest.mark.asyncio
async def test_delete_task(test_client: AsyncClient):
    column = await create_column(test_client)
    task = await create_task(test_client, column["id"])

    response = await test_client.delete(f"/api/v1/tasks/{task['id']}")

    assert response.status_code == 204
    assert (await test_client.get(f"/api/v1/tasks/{task['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_move_task_between_columns_and_within_column(test_client: AsyncClient):
    todo = await create_column(test_client, "To Do")
    done = await create_column(test_client, "Done")
    first = await create_task(test_client, todo["id"], "First")
    second = await create_task(test_client, todo["id"], "Second")

    response = await test_client.post(f"/api/v1/tasks/{first['id']}/move", json={"columnId": done["id"]})
    assert response.status_code == 200
    data = response.json()
    assert data["moved"] is True
    assert data["task"]["columnId"] == done["id"]
    assert data["task"]["order"] == 0

    third = await create_task(test_client, done["id"], "Third")
    response = await test_client.post(
        f"/api/v1/tasks/{third['id']}/move",
        json={"columnId": done["id"], "targetTaskId": first["id"]},
    )
    data = response.json()
    assert data["moved"] is True
    assert data["batch"]["ok"] is True
    assert data["task"]["order"] == 0

    response = await test_client.post(f"/api/v1/tasks/{second['id']}/move", json={"columnId": todo["id"]})
    assert response.json()["moved"] is False


# ============================================================================
# COLUMNS
# ============================================================================


@pytest.mark.asyncio
async def test_columns_crud_and_move(test_client: AsyncClient):
    a = await create_column(test_client, "A")
    b = await create_column(test_client, "B")
    assert (a["order"], b["order"]) == (0, 1)

    response = await test_client.put(f"/api/v1/columns/{a['id']}", json={"name": "Backlog"})
    assert response.json()["name"] == "Backlog"

    response = await test_client.post(f"/api/v1/columns/{b['id']}/move", json={"targetColumnId": a["id"]})
    assert [column["id"] for column in response.json()] == [b["id"], a["id"]]

    response = await test_client.get(f"/api/v1/columns/{b['id']}")
    assert response.json()["order"] == 0

    response = await test_client.post(f"/api/v1/columns/{b['id']}/move", json={"targetColumnId": "missing"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_column_with_tasks(test_client: AsyncClient):
    column = await create_column(test_client)
    task = await create_task(test_client, column["id"])

    response = await test_client.delete(f"/api/v1/columns/{column['id']}", params={"deleteTasks": "true"})

    assert response.status_code == 200
    assert response.json()["applied"] == [f"task {task['id']}", f"column {column['id']}"]
    assert (await test_client.get("/api/v1/tasks")).json() == []


@pytest.mark.asyncio
async def test_partial_batch_maps_to_conflict():
    """Test: частично выполненное каскадное удаление - 409 PARTIAL_BATCH."""
    flaky = FlakyProvider()
    board = BoardSyncContext(flaky)
    await board.start()
    column = (await board.add_column("To Do", "red")).data
    await board.add_task(column.id, "a")
    await board.add_task(column.id, "b")
    second_id = board.tasks[1].id
    flaky.tasks.fail("delete_task", when=lambda task_id: task_id == second_id)

    async with client_for(board) as client:
        response = await client.delete(f"/api/v1/columns/{column.id}", params={"deleteTasks": "true"})
    await board.close()

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "PARTIAL_BATCH"
    assert "Stopped after 1 of 3 writes" in error["message"]


@pytest.mark.asyncio
async def test_backend_failure_maps_to_503():
    flaky = FlakyProvider()
    board = BoardSyncContext(flaky)
    await board.start()
    flaky.columns.fail("create_column")

    async with client_for(board) as client:
        response = await client.post("/api/v1/columns", json={"name": "X", "color": "red"})
    await board.close()

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "BACKEND_ERROR"


# ============================================================================
# BOARD
# ============================================================================


@pytest.mark.asyncio
async def test_board_state_and_theme(test_client: AsyncClient):
    await create_column(test_client)

    response = await test_client.put("/api/v1/board/theme", json={"theme": "dark"})
    assert response.json() == {"theme": "dark"}

    response = await test_client.get("/api/v1/board")
    data = response.json()
    assert data["provider"] == "memory"
    assert data["theme"] == "dark"
    assert data["isLoading"] is False
    assert len(data["columns"]) == 1

    response = await test_client.post("/api/v1/board/theme/toggle")
    assert response.json() == {"theme": "light"}


@pytest.mark.asyncio
async def test_refresh_board(test_client: AsyncClient, board):
    await board.provider.columns.create_column(make_column("outside"))

    response = await test_client.post("/api/v1/board/refresh")

    assert response.status_code == 200
    assert [column["id"] for column in response.json()["columns"]] == ["outside"]


@pytest.mark.asyncio
async def test_export_and_import(test_client: AsyncClient):
    column = await create_column(test_client)
    await create_task(test_client, column["id"], "Exported")

    response = await test_client.get("/api/v1/board/export", params={"boardName": "Game Jam"})
    document = response.json()
    assert document["boardName"] == "Game Jam"
    assert document["version"] == "1.0"

    await test_client.delete(f"/api/v1/columns/{column['id']}", params={"deleteTasks": "true"})
    assert (await test_client.get("/api/v1/tasks")).json() == []

    response = await test_client.post("/api/v1/board/import/preview", content=json.dumps(document))
    preview = response.json()
    assert preview["valid"] is True
    assert (preview["columnsCount"], preview["tasksCount"]) == (1, 1)

    response = await test_client.post("/api/v1/board/import", content=json.dumps(document))
    assert response.status_code == 200
    assert response.json()["ok"] is True

    tasks = (await test_client.get("/api/v1/tasks")).json()
    assert [task["title"] for task in tasks] == ["Exported"]


@pytest.mark.asyncio
async def test_import_invalid_file(test_client: AsyncClient):
    response = await test_client.post("/api/v1/board/import/preview", content="{broken")
    assert response.status_code == 200
    assert response.json()["valid"] is False

    document = {"board": {"columns": [], "tasks": [{"id": "t", "title": "T", "columnId": "x", "createdAt": 1, "tags": []}]}}
    response = await test_client.post("/api/v1/board/import", content=json.dumps(document))

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["message"] == "Import file is invalid"
    assert error["details"][0]["message"] == "Task 1: references non-existent column x"


@pytest.mark.asyncio
async def test_import_preview_with_non_finite_numbers(test_client: AsyncClient):
    body = '{"exportedAt": Infinity, "board": {"columns": [], "tasks": []}}'

    response = await test_client.post("/api/v1/board/import/preview", content=body)

    assert response.status_code == 200
    assert response.json()["valid"] is True
    assert response.json()["exportedAt"] is None

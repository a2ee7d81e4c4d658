"""
Тесты для API Layer (REST endpoints).

Проверяем:
- HTTP статус-коды
- camelCase JSON в запросах и ответах
- Единый формат ошибок {message, field}
- Интеграцию всех слоёв (API → Service → Repository → DB)
"""

import io
import json
import logging

import pytest
from httpx import AsyncClient

from taskboard.core.config import ProjectDeletePolicy, settings
from taskboard.core.logging import JSONFormatter

# ============================================================================
# END-TO-END
# ============================================================================


@pytest.mark.asyncio
async def test_task_lifecycle(test_client: AsyncClient):
    """Test: создание → PATCH → удаление → 404."""
    response = await test_client.post("/api/tasks", json={"title": "Buy milk", "priority": "low"})

    assert response.status_code == 201
    task = response.json()
    assert task["title"] == "Buy milk"
    assert task["priority"] == "low"
    assert task["status"] == "todo"
    assert task["dueDate"] is None
    assert "id" in task
    assert "createdAt" in task

    response = await test_client.patch(f"/api/tasks/{task['id']}", json={"status": "completed"})

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["title"] == "Buy milk"

    response = await test_client.delete(f"/api/tasks/{task['id']}")
    assert response.status_code == 204

    response = await test_client.get(f"/api/tasks/{task['id']}")
    assert response.status_code == 404
    assert response.json() == {"message": "Task not found"}


# ============================================================================
# TASK API TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_create_task_validation_error(test_client: AsyncClient):
    """Test: ошибка валидации - 400 и первое поле."""
    response = await test_client.post("/api/tasks", json={"title": "x", "priority": "urgent"})

    assert response.status_code == 400
    data = response.json()
    assert data["field"] == "priority"
    assert data["message"]


@pytest.mark.asyncio
async def test_create_task_rejects_generated_fields(test_client: AsyncClient):
    response = await test_client.post("/api/tasks", json={"title": "x", "createdAt": "2020-01-01"})

    assert response.status_code == 400
    assert response.json()["field"] == "createdAt"


@pytest.mark.asyncio
async def test_create_task_invalid_tag_id_path(test_client: AsyncClient):
    response = await test_client.post("/api/tasks", json={"title": "x", "tagIds": [1, "abc"]})

    assert response.status_code == 400
    assert response.json()["field"] == "tagIds.1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, field",
    [
        ({"title": "x", "projectId": "7"}, "projectId"),
        ({"title": "x", "tagIds": ["1"]}, "tagIds.0"),
    ],
)
async def test_create_task_rejects_numeric_strings(test_client: AsyncClient, payload, field):
    response = await test_client.post("/api/tasks", json=payload)

    assert response.status_code == 400
    assert response.json()["field"] == field


@pytest.mark.asyncio
async def test_patch_rejects_numeric_string_parent(test_client: AsyncClient):
    task = (await test_client.post("/api/tasks", json={"title": "Child"})).json()

    response = await test_client.patch(f"/api/tasks/{task['id']}", json={"parentId": "2"})

    assert response.status_code == 400
    assert response.json()["field"] == "parentId"


@pytest.mark.asyncio
async def test_create_task_with_tags(test_client: AsyncClient):
    """Test: tagIds создаёт связи, GET /tasks/{id}/tags их возвращает."""
    urgent = (await test_client.post("/api/tags", json={"name": "Urgent"})).json()
    learning = (await test_client.post("/api/tags", json={"name": "Learning"})).json()

    task = (
        await test_client.post(
            "/api/tasks", json={"title": "Study", "tagIds": [urgent["id"], learning["id"]]}
        )
    ).json()

    response = await test_client.get(f"/api/tasks/{task['id']}/tags")
    assert response.status_code == 200
    assert {t["id"] for t in response.json()} == {urgent["id"], learning["id"]}


@pytest.mark.asyncio
async def test_task_tags_missing_task(test_client: AsyncClient):
    response = await test_client.get("/api/tasks/999/tags")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patch_replaces_tags(test_client: AsyncClient):
    urgent = (await test_client.post("/api/tags", json={"name": "Urgent"})).json()
    learning = (await test_client.post("/api/tags", json={"name": "Learning"})).json()
    task = (
        await test_client.post("/api/tasks", json={"title": "Study", "tagIds": [urgent["id"]]})
    ).json()

    # Без tagIds - связи не меняются
    await test_client.patch(f"/api/tasks/{task['id']}", json={"title": "Study hard"})
    tags = (await test_client.get(f"/api/tasks/{task['id']}/tags")).json()
    assert [t["id"] for t in tags] == [urgent["id"]]

    await test_client.patch(f"/api/tasks/{task['id']}", json={"tagIds": [learning["id"]]})
    tags = (await test_client.get(f"/api/tasks/{task['id']}/tags")).json()
    assert [t["id"] for t in tags] == [learning["id"]]

    await test_client.patch(f"/api/tasks/{task['id']}", json={"tagIds": []})
    tags = (await test_client.get(f"/api/tasks/{task['id']}/tags")).json()
    assert tags == []


@pytest.mark.asyncio
async def test_patch_null_title_rejected(test_client: AsyncClient):
    task = (await test_client.post("/api/tasks", json={"title": "Keep me"})).json()

    response = await test_client.patch(f"/api/tasks/{task['id']}", json={"title": None})

    assert response.status_code == 400
    assert response.json() == {"message": "Field cannot be null", "field": "title"}


@pytest.mark.asyncio
async def test_patch_missing_task(test_client: AsyncClient):
    response = await test_client.patch("/api/tasks/999", json={"status": "completed"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patch_parent_cycle(test_client: AsyncClient):
    parent = (await test_client.post("/api/tasks", json={"title": "Parent"})).json()
    child = (
        await test_client.post("/api/tasks", json={"title": "Child", "parentId": parent["id"]})
    ).json()

    response = await test_client.patch(
        f"/api/tasks/{parent['id']}", json={"parentId": child["id"]}
    )

    assert response.status_code == 400
    assert response.json()["field"] == "parentId"


@pytest.mark.asyncio
async def test_delete_missing_task(test_client: AsyncClient):
    response = await test_client.delete("/api/tasks/999")

    assert response.status_code == 204


@pytest.mark.asyncio
async def test_list_tasks_filters(test_client: AsyncClient):
    """Test: фильтры projectId/status/search и порядок (новые сверху)."""
    first = (
        await test_client.post("/api/tasks", json={"title": "Write report", "projectId": 1})
    ).json()
    second = (
        await test_client.post(
            "/api/tasks", json={"title": "Report review", "projectId": 1, "status": "completed"}
        )
    ).json()
    await test_client.post("/api/tasks", json={"title": "Groceries", "projectId": 2})

    all_tasks = (await test_client.get("/api/tasks")).json()
    assert len(all_tasks) == 3
    assert all_tasks[-1]["id"] == first["id"]

    by_project = (await test_client.get("/api/tasks", params={"projectId": "1"})).json()
    assert [t["id"] for t in by_project] == [second["id"], first["id"]]

    by_status = (await test_client.get("/api/tasks", params={"status": "completed"})).json()
    assert [t["id"] for t in by_status] == [second["id"]]

    by_search = (await test_client.get("/api/tasks", params={"search": "REPORT"})).json()
    assert {t["id"] for t in by_search} == {first["id"], second["id"]}


@pytest.mark.asyncio
async def test_list_tasks_ignores_unparseable_filters(test_client: AsyncClient):
    """Test: нечисловой projectId и неизвестный status - фильтр не задан."""
    await test_client.post("/api/tasks", json={"title": "One"})

    response = await test_client.get("/api/tasks", params={"projectId": "abc", "status": "done"})

    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_quick_add(test_client: AsyncClient):
    response = await test_client.post(
        "/api/tasks/quick-add", json={"text": "Finish DBMS notes tomorrow", "projectId": 3}
    )

    assert response.status_code == 201
    task = response.json()
    assert task["title"] == "Finish DBMS notes"
    assert task["dueDate"] is not None
    assert task["projectId"] == 3


@pytest.mark.asyncio
async def test_quick_add_empty_title(test_client: AsyncClient):
    response = await test_client.post("/api/tasks/quick-add", json={"text": "today"})

    assert response.status_code == 400
    assert response.json()["field"] == "text"


# ============================================================================
# PROJECT API TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_project_round_trip(test_client: AsyncClient):
    """Test: созданный проект совпадает с тем, что возвращает список."""
    payload = {"name": "Work", "slug": "work", "color": "#3b82f6"}

    response = await test_client.post("/api/projects", json=payload)
    assert response.status_code == 201
    created = response.json()

    projects = (await test_client.get("/api/projects")).json()
    found = next(p for p in projects if p["id"] == created["id"])
    assert found == {**payload, "id": created["id"]}

    response = await test_client.get(f"/api/projects/{created['id']}")
    assert response.json() == found


@pytest.mark.asyncio
async def test_project_default_color_and_duplicate_slug(test_client: AsyncClient):
    response = await test_client.post("/api/projects", json={"name": "Work", "slug": "work"})
    assert response.json()["color"] == "#000000"

    response = await test_client.post("/api/projects", json={"name": "Other", "slug": "work"})
    assert response.status_code == 400
    assert response.json()["field"] == "slug"


@pytest.mark.asyncio
async def test_get_missing_project(test_client: AsyncClient):
    response = await test_client.get("/api/projects/999")

    assert response.status_code == 404
    assert response.json() == {"message": "Project not found"}


@pytest.mark.asyncio
async def test_delete_project_keeps_task_reference(test_client: AsyncClient, monkeypatch):
    """Test: политика по умолчанию - задача сохраняет projectId."""
    monkeypatch.setattr(settings, "PROJECT_DELETE_POLICY", ProjectDeletePolicy.KEEP)
    project = (await test_client.post("/api/projects", json={"name": "Work", "slug": "work"})).json()
    task = (
        await test_client.post("/api/tasks", json={"title": "Report", "projectId": project["id"]})
    ).json()

    response = await test_client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 204

    response = await test_client.get(f"/api/tasks/{task['id']}")
    assert response.json()["projectId"] == project["id"]


@pytest.mark.asyncio
async def test_delete_project_restrict(test_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "PROJECT_DELETE_POLICY", ProjectDeletePolicy.RESTRICT)
    project = (await test_client.post("/api/projects", json={"name": "Work", "slug": "work"})).json()
    await test_client.post("/api/tasks", json={"title": "Report", "projectId": project["id"]})

    response = await test_client.delete(f"/api/projects/{project['id']}")

    assert response.status_code == 409
    assert "message" in response.json()


# ============================================================================
# TAG API TESTS
# ============================================================================


@pytest.mark.asyncio
async def test_tags(test_client: AsyncClient):
    response = await test_client.post("/api/tags", json={"name": "Urgent", "color": "#ef4444"})
    assert response.status_code == 201

    response = await test_client.post("/api/tags", json={"name": "Urgent"})
    assert response.status_code == 400
    assert response.json()["field"] == "name"

    tags = (await test_client.get("/api/tags")).json()
    assert tags == [{"id": 1, "name": "Urgent", "color": "#ef4444"}]


@pytest.mark.asyncio
async def test_create_tag_empty_name(test_client: AsyncClient):
    response = await test_client.post("/api/tags", json={"name": ""})

    assert response.status_code == 400
    assert response.json()["field"] == "name"


# ============================================================================
# AUTH / SERVICE ENDPOINTS
# ============================================================================


@pytest.mark.asyncio
async def test_api_key_required_when_configured(test_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "secret")

    response = await test_client.get("/api/tasks")
    assert response.status_code == 401
    assert "message" in response.json()

    response = await test_client.get("/api/tasks", headers={"X-API-Key": "wrong"})
    assert response.status_code == 401

    response = await test_client.get("/api/tasks", headers={"X-API-Key": "secret"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_request_id_header(test_client: AsyncClient):
    response = await test_client.get("/api/tags", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


@pytest.mark.asyncio
async def test_request_id_in_completion_log(test_client: AsyncClient):
    """Test: запись "Request completed" несёт тот же request_id, что и заголовок ответа."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    request_logger = logging.getLogger("taskboard.requests")
    previous_level = request_logger.level
    request_logger.addHandler(handler)
    request_logger.setLevel(logging.INFO)
    try:
        response = await test_client.get("/api/tags", headers={"X-Request-ID": "req-77"})
    finally:
        request_logger.removeHandler(handler)
        request_logger.setLevel(previous_level)

    records = [json.loads(line) for line in stream.getvalue().splitlines()]
    completed = [r for r in records if r["message"] == "Request completed"]
    assert completed
    assert completed[-1]["request_id"] == response.headers["X-Request-ID"] == "req-77"


@pytest.mark.asyncio
async def test_health(test_client: AsyncClient):
    response = await test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["checks"]["database"] == "connected"


@pytest.mark.asyncio
async def test_root(test_client: AsyncClient):
    response = await test_client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["tasks"] == "/api/tasks"

"""Tests for task endpoints and their ownership rules."""

from httpx import AsyncClient


async def _create_task(client: AsyncClient, headers, assignee_id: int, **extra):
    payload = {"title": "Inventory count", "assigned_to_id": assignee_id, **extra}
    resp = await client.post("/api/tasks", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_manager_creates_task(async_client: AsyncClient, manager, employee, auth_headers):
    data = await _create_task(
        async_client, auth_headers(manager), employee.id,
        description="Count shelf B", deadline="2025-12-01",
    )
    assert data["status"] == "TODO"
    assert data["assigned_to_id"] == employee.id
    assert data["assigned_to_name"] == "Eve Employee"
    assert data["created_by_id"] == manager.id
    assert data["created_by_name"] == "Max Manager"
    assert data["deadline"] == "2025-12-01"
    assert data["created_at"] is not None


async def test_employee_cannot_create_task(async_client: AsyncClient, employee, auth_headers):
    resp = await async_client.post(
        "/api/tasks", json={"title": "Self-assigned", "assigned_to_id": employee.id},
        headers=auth_headers(employee),
    )
    assert resp.status_code == 403


async def test_create_task_for_missing_assignee_is_404(async_client: AsyncClient, manager, auth_headers):
    resp = await async_client.post(
        "/api/tasks", json={"title": "Nobody", "assigned_to_id": 4242}, headers=auth_headers(manager)
    )
    assert resp.status_code == 404


async def test_list_is_scoped_for_employees(
    async_client: AsyncClient, manager, employee, other_employee, auth_headers
):
    mine = await _create_task(async_client, auth_headers(manager), employee.id, title="Mine")
    await _create_task(async_client, auth_headers(manager), other_employee.id, title="Theirs")

    resp = await async_client.get("/api/tasks", headers=auth_headers(employee))
    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == [mine["id"]]

    resp = await async_client.get("/api/tasks", headers=auth_headers(manager))
    assert len(resp.json()) == 2


async def test_employee_reads_only_own_task(
    async_client: AsyncClient, manager, employee, other_employee, auth_headers
):
    task = await _create_task(async_client, auth_headers(manager), other_employee.id)
    resp = await async_client.get(f"/api/tasks/{task['id']}", headers=auth_headers(employee))
    assert resp.status_code == 403

    resp = await async_client.get(f"/api/tasks/{task['id']}", headers=auth_headers(other_employee))
    assert resp.status_code == 200


async def test_missing_task_is_404_not_403(async_client: AsyncClient, employee, auth_headers):
    resp = await async_client.get("/api/tasks/999", headers=auth_headers(employee))
    assert resp.status_code == 404


async def test_employee_updates_status_of_own_task(async_client: AsyncClient, manager, employee, auth_headers):
    task = await _create_task(async_client, auth_headers(manager), employee.id)
    resp = await async_client.put(
        f"/api/tasks/{task['id']}", json={"status": "IN_PROGRESS"}, headers=auth_headers(employee)
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "IN_PROGRESS"
    assert resp.json()["title"] == task["title"]


async def test_employee_cannot_change_other_fields(async_client: AsyncClient, manager, employee, auth_headers):
    task = await _create_task(async_client, auth_headers(manager), employee.id)
    resp = await async_client.put(
        f"/api/tasks/{task['id']}",
        json={"status": "COMPLETED", "title": "Renamed"},
        headers=auth_headers(employee),
    )
    assert resp.status_code == 403

    # nothing was applied
    resp = await async_client.get(f"/api/tasks/{task['id']}", headers=auth_headers(manager))
    assert resp.json()["status"] == "TODO"
    assert resp.json()["title"] == task["title"]


async def test_employee_cannot_update_someone_elses_task(
    async_client: AsyncClient, manager, employee, other_employee, auth_headers
):
    task = await _create_task(async_client, auth_headers(manager), other_employee.id)
    resp = await async_client.put(
        f"/api/tasks/{task['id']}", json={"status": "COMPLETED"}, headers=auth_headers(employee)
    )
    assert resp.status_code == 403


async def test_manager_reassigns_task(
    async_client: AsyncClient, manager, employee, other_employee, auth_headers
):
    task = await _create_task(async_client, auth_headers(manager), employee.id)
    resp = await async_client.put(
        f"/api/tasks/{task['id']}",
        json={"assigned_to_id": other_employee.id, "title": "Recount"},
        headers=auth_headers(manager),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["assigned_to_id"] == other_employee.id
    assert data["assigned_to_name"] == "Otto Other"
    assert data["title"] == "Recount"


async def test_delete_by_non_creator_manager_forbidden(
    async_client: AsyncClient, create_user, manager, employee, auth_headers
):
    from swms.core.enums import Role

    task = await _create_task(async_client, auth_headers(manager), employee.id)
    second_manager = await create_user("manager2@test.com", Role.MANAGER)
    resp = await async_client.delete(f"/api/tasks/{task['id']}", headers=auth_headers(second_manager))
    assert resp.status_code == 403


async def test_delete_by_creator_and_admin(async_client: AsyncClient, admin, manager, employee, auth_headers):
    first = await _create_task(async_client, auth_headers(manager), employee.id)
    second = await _create_task(async_client, auth_headers(manager), employee.id)

    resp = await async_client.delete(f"/api/tasks/{first['id']}", headers=auth_headers(manager))
    assert resp.status_code == 204
    resp = await async_client.delete(f"/api/tasks/{second['id']}", headers=auth_headers(admin))
    assert resp.status_code == 204

    resp = await async_client.get("/api/tasks", headers=auth_headers(admin))
    assert resp.json() == []


async def test_employee_delete_blocked_at_route_layer(async_client: AsyncClient, manager, employee, auth_headers):
    task = await _create_task(async_client, auth_headers(manager), employee.id)
    resp = await async_client.delete(f"/api/tasks/{task['id']}", headers=auth_headers(employee))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Insufficient role for this route"

"""HTTP tests for the admin surface."""

import pytest


@pytest.mark.asyncio
async def test_admin_routes_require_access_key(client):
    assert (await client.get("/api/v1/admin/dashboard")).status_code == 401
    assert (
        await client.get("/api/v1/admin/dashboard", params={"accesskey": "wrong"})
    ).status_code == 401


@pytest.mark.asyncio
async def test_admin_key_header_is_accepted(client, admin_params):
    response = await client.get(
        "/api/v1/admin/dashboard", headers={"X-Admin-Key": admin_params["accesskey"]}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_dashboard_counts(client, admin_params, scheduler):
    await client.post(
        "/api/v1/conversions",
        files=[("file", ("a.docx", b"A", "application/octet-stream"))],
        data={"fromFormat": "docx", "toFormat": "pdf", "quality": "low"},
    )
    await scheduler.drain()

    data = (await client.get("/api/v1/admin/dashboard", params=admin_params)).json()
    assert data["users"]["total"] == 1
    assert data["users"]["byType"] == {"visitor": 1}
    assert data["conversions"]["total"] == 1
    assert data["conversions"]["completed"] == 1
    assert data["tools"] == {"total": 0, "active": 0}


@pytest.mark.asyncio
async def test_users_list_and_delete(client, admin_params):
    await client.get("/api/v1/health", headers={"x-user-token": "visitor-a"})
    users = (await client.get("/api/v1/admin/users", params=admin_params)).json()
    tokens = {u["authToken"] for u in users}
    assert "visitor-a" in tokens

    target = next(u for u in users if u["authToken"] == "visitor-a")
    deleted = await client.delete(f"/api/v1/admin/users/{target['id']}", params=admin_params)
    assert deleted.status_code == 200
    again = await client.delete(f"/api/v1/admin/users/{target['id']}", params=admin_params)
    assert again.status_code == 404

    cleared = await client.delete("/api/v1/admin/users", params=admin_params)
    assert cleared.status_code == 200


@pytest.mark.asyncio
async def test_settings_round_trip(client, admin_params):
    response = await client.post(
        "/api/v1/admin/settings",
        params=admin_params,
        json={"key": "site_name", "value": "Ai2PDF", "description": "Site title"},
    )
    assert response.status_code == 200

    settings = (await client.get("/api/v1/admin/settings", params=admin_params)).json()
    assert settings["site_name"] == "Ai2PDF"


@pytest.mark.asyncio
async def test_toggle_api_service_requires_boolean(client, admin_params):
    bad = await client.post(
        "/api/v1/admin/toggle-api-service", params=admin_params, json={"enabled": "yes"}
    )
    assert bad.status_code == 400

    ok = await client.post(
        "/api/v1/admin/toggle-api-service", params=admin_params, json={"enabled": True}
    )
    assert ok.status_code == 200
    assert ok.json() == {"success": True, "enabled": True}

    status = (await client.get("/api/v1/admin/api-status", params=admin_params)).json()
    assert status["enabled"] is True
    assert status["totalKeys"] == 0

    activity = (await client.get("/api/v1/admin/activity", params=admin_params)).json()
    assert activity[0]["action"] == "api_service_toggled"


@pytest.mark.asyncio
async def test_plans_and_key_issue(client, admin_params):
    plan = await client.post(
        "/api/v1/admin/api-plans",
        params=admin_params,
        json={"name": "Tiny", "price": 50, "requestLimit": 5, "features": ["5 calls"]},
    )
    assert plan.status_code == 201
    plan_id = plan.json()["id"]

    plans = (await client.get("/api/v1/admin/api-plans", params=admin_params)).json()
    assert [p["name"] for p in plans] == ["Tiny"]

    issued = await client.post(
        "/api/v1/admin/api-keys",
        params=admin_params,
        json={"userToken": "buyer", "planId": plan_id},
    )
    assert issued.status_code == 201
    assert issued.json()["apiKey"].startswith("ak_")
    assert "*" not in issued.json()["apiKey"]

    unknown = await client.post(
        "/api/v1/admin/api-keys",
        params=admin_params,
        json={"userToken": "buyer", "planId": "missing"},
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_conversions_and_stored_files(client, admin_params):
    await client.post(
        "/api/v1/conversions",
        files=[("file", ("notes.txt", b"hello", "text/plain"))],
        data={"fromFormat": "txt", "toFormat": "pdf"},
    )

    jobs = (await client.get("/api/v1/admin/conversions", params=admin_params)).json()
    assert [j["originalFilename"] for j in jobs] == ["notes.txt"]

    files = (await client.get("/api/v1/admin/files", params=admin_params)).json()
    assert len(files) == 1
    assert files[0]["name"].startswith("notes_")

    name = files[0]["name"]
    assert (await client.delete(f"/api/v1/admin/files/{name}", params=admin_params)).status_code == 200
    assert (await client.delete(f"/api/v1/admin/files/{name}", params=admin_params)).status_code == 404


@pytest.mark.asyncio
async def test_tool_upload_serve_and_delete(client, admin_params):
    html = b"<!DOCTYPE html><html><body>Counter</body></html>"
    created = await client.post(
        "/api/v1/admin/tools",
        params=admin_params,
        files=[("htmlFile", ("counter.html", html, "text/html"))],
        data={"name": "Word Counter", "categoryId": "text-tools"},
    )
    assert created.status_code == 201
    tool = created.json()
    assert tool["folderName"] == "word-counter"

    duplicate = await client.post(
        "/api/v1/admin/tools",
        params=admin_params,
        files=[("htmlFile", ("counter.html", html, "text/html"))],
        data={"name": "Word Counter"},
    )
    assert duplicate.status_code == 409

    listed = (await client.get("/api/v1/tools")).json()
    assert [t["folderName"] for t in listed] == ["word-counter"]

    page = await client.get("/tools/word-counter")
    assert page.status_code == 200
    assert page.content == html

    after_visit = (await client.get("/api/v1/admin/tools", params=admin_params)).json()
    assert after_visit[0]["usageCount"] == 1

    removed = await client.delete(f"/api/v1/admin/tools/{tool['id']}", params=admin_params)
    assert removed.status_code == 200
    missing = await client.get("/tools/word-counter")
    assert missing.status_code == 404
    assert "Tool Not Found" in missing.text


@pytest.mark.asyncio
async def test_tool_upload_rejects_non_html(client, admin_params):
    response = await client.post(
        "/api/v1/admin/tools",
        params=admin_params,
        files=[("htmlFile", ("script.js", b"alert(1)", "text/javascript"))],
        data={"name": "Script"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_categories(client, admin_params):
    categories = (await client.get("/api/v1/admin/categories", params=admin_params)).json()
    assert any(c["slug"] == "pdf-tools" for c in categories)

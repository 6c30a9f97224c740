def template_body(**overrides) -> dict:
    body = {
        "name": "Grade 10 Physics",
        "subject": "Physics",
        "class": "10",
        "section": "B",
        "instructorId": "instructor-3",
        "room": "Lab-2",
        "recurrencePattern": "weekly",
        "recurrenceDays": [2, 4],
        "startTime": "11:00",
        "endTime": "12:00",
    }
    body.update(overrides)
    return body


def create_template(client, headers, **overrides) -> dict:
    response = client.post("/api/templates/", json=template_body(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


WINDOW = {"startDate": "2026-11-02", "numberOfWeeks": 2}


def test_create_template_and_fetch(client, scheduler_headers):
    created = create_template(client, scheduler_headers)

    assert created["duration"] == 60
    assert created["recurrenceDays"] == [2, 4]
    assert created["generatedSessionIds"] == []
    assert created["isActive"] is True

    response = client.get(f"/api/templates/{created['id']}", headers=scheduler_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Grade 10 Physics"


def test_weekly_template_without_days_is_rejected(client, scheduler_headers):
    response = client.post("/api/templates/", json=template_body(recurrenceDays=[]), headers=scheduler_headers)
    assert response.status_code == 422


def test_preview_reports_drafts_without_persisting(client, scheduler_headers):
    template = create_template(client, scheduler_headers)

    response = client.post(f"/api/templates/{template['id']}/preview", json=WINDOW, headers=scheduler_headers)

    assert response.status_code == 200
    body = response.json()
    assert [draft["date"] for draft in body["drafts"]] == ["2026-11-03", "2026-11-05", "2026-11-10", "2026-11-12"]
    assert body["validation"]["totalDrafts"] == 4
    assert body["validation"]["hasAnyConflicts"] is False
    assert client.get("/api/sessions/", headers=scheduler_headers).json() == []


def test_apply_then_reapply(client, scheduler_headers):
    template = create_template(client, scheduler_headers)

    response = client.post(f"/api/templates/{template['id']}/apply", json=WINDOW, headers=scheduler_headers)
    assert response.status_code == 201
    applied = response.json()
    assert applied["created"] == 4
    assert applied["skipped"] == 0
    assert {item["recurrenceId"] for item in applied["sessions"]} == {template["id"]}

    response = client.post(f"/api/templates/{template['id']}/apply", json=WINDOW, headers=scheduler_headers)
    assert response.status_code == 409
    body = response.json()
    assert body["details"]["summary"] == {"totalDrafts": 4, "conflictingDrafts": 4, "hasAnyConflicts": True}
    assert len(body["details"]["conflictingSessions"]) == 4

    response = client.post(
        f"/api/templates/{template['id']}/apply",
        json={**WINDOW, "skipConflicts": True},
        headers=scheduler_headers,
    )
    assert response.status_code == 201
    assert response.json()["created"] == 0
    assert response.json()["skipped"] == 4

    stored = client.get(f"/api/templates/{template['id']}", headers=scheduler_headers).json()
    assert len(stored["generatedSessionIds"]) == 4
    assert stored["lastApplied"] is not None


def test_apply_without_window_is_rejected(client, scheduler_headers):
    template = create_template(client, scheduler_headers)

    response = client.post(f"/api/templates/{template['id']}/apply", json={}, headers=scheduler_headers)

    assert response.status_code == 400
    assert "Insufficient date range" in response.json()["message"]


def test_update_and_delete_template(client, scheduler_headers):
    template = create_template(client, scheduler_headers)

    response = client.put(
        f"/api/templates/{template['id']}",
        json={"endTime": "12:30", "isActive": False},
        headers=scheduler_headers,
    )
    assert response.status_code == 200
    assert response.json()["duration"] == 90
    assert response.json()["isActive"] is False

    listed = client.get("/api/templates/", params={"isActive": "false"}, headers=scheduler_headers).json()
    assert [item["id"] for item in listed] == [template["id"]]

    assert client.delete(f"/api/templates/{template['id']}", headers=scheduler_headers).json() == {"success": True}
    assert client.get(f"/api/templates/{template['id']}", headers=scheduler_headers).status_code == 404


def test_unknown_template_returns_404(client, scheduler_headers):
    response = client.post("/api/templates/missing/preview", json=WINDOW, headers=scheduler_headers)
    assert response.status_code == 404


def test_update_with_nulls_keeps_required_fields(client, scheduler_headers):
    template = create_template(client, scheduler_headers)

    response = client.put(
        f"/api/templates/{template['id']}",
        json={"name": None, "startTime": None, "capacity": None, "recurrenceDays": None, "room": None},
        headers=scheduler_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Grade 10 Physics"
    assert body["startTime"] == "11:00"
    assert body["capacity"] == 0
    assert body["recurrenceDays"] == [2, 4]
    assert body["room"] is None

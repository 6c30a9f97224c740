def session_body(**overrides) -> dict:
    body = {
        "subject": "Mathematics",
        "class": "10",
        "section": "A",
        "instructorId": "instructor-1",
        "instructorName": "R. Iyer",
        "date": "2026-11-02",
        "startTime": "9:00",
        "endTime": "10:00",
        "room": "R101",
        "capacity": 40,
    }
    body.update(overrides)
    return body


def create(client, headers, **overrides) -> dict:
    response = client.post("/api/sessions/", json=session_body(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_requires_authentication(client):
    response = client.get("/api/sessions/")
    assert response.status_code in (401, 403)


def test_students_cannot_create_sessions(client, student_headers):
    response = client.post("/api/sessions/", json=session_body(), headers=student_headers)
    assert response.status_code == 403


def test_create_and_fetch_session(client, scheduler_headers):
    created = create(client, scheduler_headers)

    assert created["class"] == "10"
    assert created["startTime"] == "09:00"
    assert created["duration"] == 60
    assert created["status"] == "scheduled"
    assert created["title"] == "Mathematics - 10"
    assert created["createdBy"] == "admin-1"
    assert created["notificationsSent"]["created"] is True

    response = client.get(f"/api/sessions/{created['id']}", headers=scheduler_headers)
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_malformed_times_are_rejected(client, scheduler_headers):
    response = client.post("/api/sessions/", json=session_body(startTime="25:00"), headers=scheduler_headers)
    assert response.status_code == 422

    response = client.post(
        "/api/sessions/", json=session_body(startTime="11:00", endTime="10:00"), headers=scheduler_headers
    )
    assert response.status_code == 422


def test_conflicting_session_returns_409_with_report(client, scheduler_headers):
    first = create(client, scheduler_headers)

    response = client.post(
        "/api/sessions/",
        json=session_body(startTime="09:30", endTime="10:30", room="R202", section="B"),
        headers=scheduler_headers,
    )

    assert response.status_code == 409
    body = response.json()
    assert body["message"] == "Schedule conflicts detected"
    conflicts = body["details"]["conflicts"]
    assert [item["id"] for item in conflicts["instructor"]] == [first["id"]]
    assert conflicts["room"] == []
    assert conflicts["students"] == []


def test_missing_session_returns_404(client, scheduler_headers):
    response = client.get("/api/sessions/does-not-exist", headers=scheduler_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Session with id does-not-exist not found"


def test_reschedule_then_cancel_then_start_is_refused(client, scheduler_headers):
    created = create(client, scheduler_headers)

    response = client.post(
        f"/api/sessions/{created['id']}/reschedule",
        json={"date": "2026-11-03", "startTime": "14:00", "endTime": "15:00"},
        headers=scheduler_headers,
    )
    assert response.status_code == 200
    rescheduled = response.json()
    assert rescheduled["status"] == "rescheduled"
    assert rescheduled["rescheduledFrom"] == "2026-11-02"
    assert rescheduled["rescheduledTo"] == "2026-11-03"

    response = client.post(
        f"/api/sessions/{created['id']}/cancel", json={"reason": "Holiday"}, headers=scheduler_headers
    )
    assert response.status_code == 200
    assert response.json()["cancelReason"] == "Holiday"

    response = client.post(f"/api/sessions/{created['id']}/start", headers=scheduler_headers)
    assert response.status_code == 400
    assert response.json()["details"] == {"operation": "start", "currentStatus": "cancelled"}


def test_start_complete_and_materials(client, scheduler_headers):
    created = create(client, scheduler_headers)

    response = client.post(
        f"/api/sessions/{created['id']}/materials",
        json={"materials": [{"name": "Slides", "url": "https://files.example/slides.pdf", "type": "pdf"}]},
        headers=scheduler_headers,
    )
    assert response.status_code == 200
    assert response.json()["materials"][0]["name"] == "Slides"
    assert response.json()["materials"][0]["uploadedAt"]

    assert client.post(f"/api/sessions/{created['id']}/start", headers=scheduler_headers).json()["status"] == "ongoing"
    response = client.post(f"/api/sessions/{created['id']}/complete", headers=scheduler_headers)
    assert response.json()["status"] == "completed"


def test_update_session(client, scheduler_headers):
    created = create(client, scheduler_headers)

    response = client.put(
        f"/api/sessions/{created['id']}",
        json={"startTime": "10:00", "endTime": "11:30", "description": "Bring calculators"},
        headers=scheduler_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["duration"] == 90
    assert body["description"] == "Bring calculators"


def test_list_sessions_filters_and_orders(client, scheduler_headers):
    later = create(client, scheduler_headers, date="2026-11-04")
    earlier = create(client, scheduler_headers, date="2026-11-02")
    create(client, scheduler_headers, **{"class": "11", "instructorId": "instructor-2", "room": "R303"})

    response = client.get("/api/sessions/", params={"class": "10"}, headers=scheduler_headers)

    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [earlier["id"], later["id"]]


def test_delete_session(client, scheduler_headers):
    created = create(client, scheduler_headers)

    response = client.delete(f"/api/sessions/{created['id']}", headers=scheduler_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert client.get(f"/api/sessions/{created['id']}", headers=scheduler_headers).status_code == 404


def test_conflict_check_endpoint(client, student_headers, scheduler_headers):
    created = create(client, scheduler_headers)
    proposal = {
        "class": "10",
        "section": "A",
        "date": "2026-11-02",
        "startTime": "09:45",
        "endTime": "10:15",
    }

    response = client.post("/api/conflicts/check", json=proposal, headers=student_headers)
    assert response.status_code == 200
    assert response.json()["hasConflicts"] is True
    assert [item["id"] for item in response.json()["students"]] == [created["id"]]

    response = client.post(
        "/api/conflicts/check",
        json={**proposal, "excludeId": created["id"], "excludeKind": "session"},
        headers=student_headers,
    )
    assert response.json()["hasConflicts"] is False

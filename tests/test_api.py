# tests/test_api.py
from datetime import date, timedelta

import pytest

from app.core import Role
from app.db.models import Doctor


@pytest.fixture
async def doctor_headers(sign_in):
    return await sign_in("grey@example.com", Role.DOCTOR, "Grey")


@pytest.fixture
async def patient_headers(sign_in):
    return await sign_in("sam@example.com", Role.PATIENT, "Sam")


async def _me(client, headers):
    return (await client.get("/auth/me", headers=headers)).json()["user"]


async def _book(client, headers, counterpart_field, counterpart_id, **fields):
    body = {
        "date": (date.today() + timedelta(days=3)).isoformat(),
        "time": "09:30",
        counterpart_field: counterpart_id,
        **fields,
    }
    return await client.post("/appointments", json=body, headers=headers)


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Healthy"
    assert body["database"]["healthy"] is True
    assert "X-Request-ID" in response.headers


async def test_me_without_session(client):
    response = await client.get("/auth/me")
    assert response.status_code == 200
    assert response.json() == {"user": None}


async def test_login_failure_is_auth_error(client):
    response = await client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "secret123"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "AUTH_ERROR"
    assert response.json()["message"] == "Invalid login credentials"


async def test_duplicate_registration(client, doctor_headers):
    response = await client.post(
        "/auth/register",
        json={"email": "grey@example.com", "password": "secret123", "name": "Grey", "role": "doctor"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "User already registered"


async def test_register_validates_input(client):
    response = await client.post(
        "/auth/register",
        json={"email": "not-an-email", "password": "123", "name": "X", "role": "nurse"},
    )
    assert response.status_code == 422


async def test_me_and_logout(client, doctor_headers):
    me = await _me(client, doctor_headers)
    assert me["email"] == "grey@example.com"
    assert me["role"] == "doctor"
    assert me["role_label"] == "Healthcare Provider"

    response = await client.post("/auth/logout", headers=doctor_headers)
    assert response.status_code == 204
    assert await _me(client, doctor_headers) is None
    assert (await client.get("/appointments", headers=doctor_headers)).status_code == 401


async def test_protected_routes_need_a_token(client):
    for path in ("/appointments", "/appointments/upcoming", "/reminders", "/doctors", "/patients"):
        assert (await client.get(path)).status_code == 401


async def test_directory(client, doctor_headers, patient_headers):
    doctors = (await client.get("/doctors", headers=patient_headers)).json()
    patients = (await client.get("/patients", headers=doctor_headers)).json()
    assert [d["name"] for d in doctors] == ["Grey"]
    assert [p["name"] for p in patients] == ["Sam"]


async def test_booking_flow(client, doctor_headers, patient_headers):
    patient = await _me(client, patient_headers)
    doctor = await _me(client, doctor_headers)

    response = await _book(client, doctor_headers, "patient_id", patient["id"], notes="Check-up")
    assert response.status_code == 201
    assert response.headers["X-Invalidate-Views"] == "appointments,upcoming"
    created = response.json()
    assert created["doctor_id"] == doctor["id"]
    assert created["status"] == "scheduled"
    assert created["doctor"]["name"] == "Grey"
    assert created["patient"]["name"] == "Sam"

    # Visible to the patient too
    listed = (await client.get("/appointments", headers=patient_headers)).json()
    assert [a["id"] for a in listed] == [created["id"]]

    upcoming = (await client.get("/appointments/upcoming", headers=patient_headers)).json()
    assert upcoming[0]["headline"] == "Appointment with Dr. Grey"
    upcoming = (await client.get("/appointments/upcoming", headers=doctor_headers)).json()
    assert upcoming[0]["headline"] == "Appointment with Sam"

    response = await client.patch(
        f"/appointments/{created['id']}", json={"status": "completed"}, headers=patient_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert (await client.get("/appointments/upcoming", headers=doctor_headers)).json() == []

    completed = await client.get(
        "/appointments", params={"status": "completed"}, headers=doctor_headers
    )
    assert len(completed.json()) == 1
    scheduled = await client.get(
        "/appointments", params={"status": "scheduled"}, headers=doctor_headers
    )
    assert scheduled.json() == []

    response = await client.delete(f"/appointments/{created['id']}", headers=doctor_headers)
    assert response.status_code == 204
    assert response.headers["X-Invalidate-Views"] == "appointments,upcoming"
    assert (await client.get(f"/appointments/{created['id']}", headers=doctor_headers)).status_code == 404


async def test_booking_requires_counterpart(client, doctor_headers, patient_headers):
    response = await client.post(
        "/appointments", json={"date": "2030-01-01", "time": "09:00"}, headers=patient_headers
    )
    assert response.status_code == 422
    assert response.json()["message"] == "Doctor is required"

    response = await client.post(
        "/appointments", json={"date": "2030-01-01", "time": "09:00"}, headers=doctor_headers
    )
    assert response.json()["message"] == "Patient is required"


async def test_booking_rejects_bad_time(client, patient_headers, doctor_headers):
    doctor = await _me(client, doctor_headers)
    response = await _book(client, patient_headers, "doctor_id", doctor["id"], time="9:30")
    assert response.status_code == 422


async def test_filter_by_date(client, doctor_headers, patient_headers):
    patient = await _me(client, patient_headers)
    await _book(client, doctor_headers, "patient_id", patient["id"], date="2030-01-02", time="11:00")
    await _book(client, doctor_headers, "patient_id", patient["id"], date="2030-01-02", time="08:00")
    await _book(client, doctor_headers, "patient_id", patient["id"], date="2030-01-03", time="07:00")

    response = await client.get("/appointments", params={"date": "2030-01-02"}, headers=doctor_headers)

    assert [a["time"] for a in response.json()] == ["08:00", "11:00"]
    bad = await client.get("/appointments", params={"status": "archived"}, headers=doctor_headers)
    assert bad.status_code == 422


async def test_outsider_cannot_touch_appointment(client, sign_in, doctor_headers, patient_headers):
    patient = await _me(client, patient_headers)
    created = (await _book(client, doctor_headers, "patient_id", patient["id"])).json()
    outsider = await sign_in("kim@example.com", Role.PATIENT, "Kim")

    path = f"/appointments/{created['id']}"
    assert (await client.get(path, headers=outsider)).status_code == 404
    assert (await client.patch(path, json={"notes": "x"}, headers=outsider)).status_code == 404
    assert (await client.delete(path, headers=outsider)).status_code == 404
    assert (await client.get(f"{path}/reminders", headers=outsider)).status_code == 404


async def test_reminder_flow(client, sign_in, doctor_headers, patient_headers):
    patient = await _me(client, patient_headers)
    appointment = (
        await _book(client, doctor_headers, "patient_id", patient["id"], date="2030-05-02", time="14:30")
    ).json()

    response = await client.post(
        f"/appointments/{appointment['id']}/reminders",
        json={"time_before": 1440, "message": "Hi {patient_name}, see Dr. {doctor_name} at {time}"},
        headers=doctor_headers,
    )
    assert response.status_code == 201
    assert response.headers["X-Invalidate-Views"] == "reminders"
    reminder = response.json()
    assert reminder["status"] == "pending"
    assert reminder["type"] == "sms"
    assert reminder["recipient_type"] == "patient"

    listed = (await client.get(f"/appointments/{appointment['id']}/reminders", headers=patient_headers)).json()
    assert [r["id"] for r in listed] == [reminder["id"]]

    overview = (await client.get("/reminders", headers=patient_headers)).json()
    assert len(overview) == 1
    assert overview[0]["offset_label"] == "1 day before"
    assert overview[0]["rendered_message"] == "Hi Sam, see Dr. Grey at 14:30"
    assert overview[0]["appointment"]["id"] == appointment["id"]

    assert (await client.get("/reminders", params={"status": "sent"}, headers=patient_headers)).json() == []

    response = await client.patch(
        f"/reminders/{reminder['id']}", json={"status": "sent"}, headers=doctor_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "sent"
    assert len((await client.get("/reminders", params={"status": "sent"}, headers=patient_headers)).json()) == 1

    outsider = await sign_in("kim@example.com", Role.PATIENT, "Kim")
    assert (await client.get("/reminders", headers=outsider)).json() == []
    assert (await client.delete(f"/reminders/{reminder['id']}", headers=outsider)).status_code == 404

    response = await client.delete(f"/reminders/{reminder['id']}", headers=patient_headers)
    assert response.status_code == 204
    assert (await client.get("/reminders", headers=patient_headers)).json() == []


async def test_deleting_appointment_drops_reminders(client, doctor_headers, patient_headers):
    patient = await _me(client, patient_headers)
    appointment = (await _book(client, doctor_headers, "patient_id", patient["id"])).json()
    await client.post(f"/appointments/{appointment['id']}/reminders", json={}, headers=doctor_headers)

    await client.delete(f"/appointments/{appointment['id']}", headers=doctor_headers)

    assert (await client.get("/reminders", headers=doctor_headers)).json() == []


async def test_reminder_options(client, doctor_headers):
    body = (await client.get("/reminders/options", headers=doctor_headers)).json()

    assert [c["label"] for c in body["channels"]] == ["SMS", "WhatsApp", "Email"]
    assert [o["value"] for o in body["time_before"]] == [15, 30, 60, 120, 1440, 2880]
    assert body["time_before"][3]["label"] == "2 hours before"
    assert body["defaults"]["message"] == "Reminder: You have an appointment coming up."
    assert "doctor_name" in body["placeholders"]


@pytest.mark.parametrize("status", ["cancelled", "completed"])
async def test_reminders_only_for_scheduled_appointments(client, doctor_headers, patient_headers, status):
    patient = await _me(client, patient_headers)
    appointment = (await _book(client, doctor_headers, "patient_id", patient["id"])).json()
    path = f"/appointments/{appointment['id']}"
    await client.patch(path, json={"status": status}, headers=doctor_headers)

    response = await client.post(f"{path}/reminders", json={}, headers=doctor_headers)

    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert (await client.get(f"{path}/reminders", headers=doctor_headers)).json() == []


async def test_second_device_keeps_first_session(client, doctor_headers):
    response = await client.post(
        "/auth/login", json={"email": "grey@example.com", "password": "secret123"}
    )
    phone = {"Authorization": f"Bearer {response.json()['access_token']}"}

    assert (await _me(client, doctor_headers))["email"] == "grey@example.com"
    assert (await _me(client, phone))["email"] == "grey@example.com"

    await client.post("/auth/logout", headers=phone)
    assert await _me(client, phone) is None
    assert (await _me(client, doctor_headers))["email"] == "grey@example.com"


async def test_doctor_picker_label(client, session, doctor_headers, patient_headers):
    doctor_id = (await _me(client, doctor_headers))["id"]
    profile = await session.get(Doctor, doctor_id)
    profile.specialty = "Surgery"
    await session.commit()

    doctors = (await client.get("/doctors", headers=patient_headers)).json()

    assert doctors[0]["display_name"] == "Grey (Surgery)"
    assert (await _me(client, patient_headers))["role_label"] == "Patient"

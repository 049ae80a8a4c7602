"""User endpoints: admin-only account management."""
import pytest

from medslot.enums import UserRole
from medslot.models import User

MONDAY = "2024-01-01"


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


def user_payload(**overrides):
    payload = {"name": "Jane Roe", "email": "Jane.Roe@Care.test", "role": "patient"}
    payload.update(overrides)
    return payload


class TestCreateUser:
    def test_create_patient(self, client, auth_headers, admin):
        response = client.post("/users", json=user_payload(), headers=auth_headers(admin))

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "jane.roe@care.test"
        assert data["role"] == "patient"
        assert data["doctorId"] is None

    def test_created_patient_can_book(self, client, auth_headers, admin, make_doctor, db):
        doctor = make_doctor()
        created = client.post("/users", json=user_payload(), headers=auth_headers(admin)).json()
        patient = db.get(User, created["id"])

        response = client.post(
            "/appointments",
            json={"doctorId": doctor.id, "date": MONDAY, "time": "09:00 AM"},
            headers=auth_headers(patient),
        )

        assert response.status_code == 201
        assert response.json()["patientName"] == "Jane Roe"

    def test_duplicate_email(self, client, auth_headers, admin):
        client.post("/users", json=user_payload(), headers=auth_headers(admin))

        response = client.post("/users", json=user_payload(name="Other"), headers=auth_headers(admin))

        assert response.status_code == 400
        assert response.json()["detail"] == "Email already exists"

    @pytest.mark.parametrize(
        "overrides",
        [{"role": "superuser"}, {"email": "not-an-email"}, {"name": ""}],
    )
    def test_invalid_payload(self, client, auth_headers, admin, overrides):
        response = client.post("/users", json=user_payload(**overrides), headers=auth_headers(admin))

        assert response.status_code == 422

    def test_no_password_field_is_exposed(self, client, auth_headers, admin):
        data = client.post("/users", json=user_payload(), headers=auth_headers(admin)).json()

        assert "password" not in data


class TestAccess:
    @pytest.mark.parametrize("role", [UserRole.PATIENT, UserRole.DOCTOR])
    def test_non_admin_forbidden(self, client, auth_headers, make_user, role):
        headers = auth_headers(make_user(role))

        assert client.get("/users", headers=headers).status_code == 403
        assert client.post("/users", json=user_payload(), headers=headers).status_code == 403

    def test_anonymous_unauthorized(self, client):
        assert client.get("/users").status_code == 401


class TestListAndUpdate:
    def test_list_includes_every_user(self, client, auth_headers, admin, make_user, make_doctor):
        make_user(UserRole.PATIENT)
        doctor = make_doctor()

        data = client.get("/users", headers=auth_headers(admin)).json()

        assert len(data) == 3
        doctor_entry = next(u for u in data if u["id"] == doctor.user_id)
        assert doctor_entry["doctorId"] == doctor.id

    def test_unknown_user(self, client, auth_headers, admin):
        response = client.get("/users/999", headers=auth_headers(admin))

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_partial_update(self, client, auth_headers, admin, make_user):
        user = make_user(UserRole.PATIENT)

        response = client.put(
            f"/users/{user.id}", json={"role": "admin", "avatar": "a.png"}, headers=auth_headers(admin)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "admin"
        assert data["avatar"] == "a.png"
        assert data["name"] == user.name

    def test_update_email_taken_by_someone_else(self, client, auth_headers, admin, make_user):
        first = make_user(UserRole.PATIENT)
        second = make_user(UserRole.PATIENT)

        response = client.put(
            f"/users/{second.id}", json={"email": first.email}, headers=auth_headers(admin)
        )

        assert response.status_code == 400

    def test_rename_keeps_doctor_profile_in_step(self, client, auth_headers, admin, make_doctor):
        doctor = make_doctor()

        client.put(f"/users/{doctor.user_id}", json={"name": "Dr. New Name"}, headers=auth_headers(admin))

        assert client.get(f"/doctors/{doctor.id}").json()["name"] == "Dr. New Name"

    def test_doctor_profile_keeps_doctor_role(self, client, auth_headers, admin, make_doctor):
        doctor = make_doctor()

        response = client.put(f"/users/{doctor.user_id}", json={"role": "patient"}, headers=auth_headers(admin))

        assert response.status_code == 400


class TestDeleteUser:
    def test_delete_patient_keeps_appointment_history(
        self, client, auth_headers, admin, make_user, make_doctor, make_appointment
    ):
        patient = make_user(UserRole.PATIENT, name="John Smith")
        appointment = make_appointment(make_doctor(), patient, MONDAY, "09:00 AM")
        headers = auth_headers(admin)

        response = client.delete(f"/users/{patient.id}", headers=headers)

        assert response.status_code == 200
        assert client.get(f"/users/{patient.id}", headers=headers).status_code == 404
        kept = client.get(f"/appointments/{appointment.id}", headers=headers).json()
        assert kept["patientId"] is None
        assert kept["patientName"] == "John Smith"

    def test_delete_doctor_user_removes_profile(self, client, auth_headers, admin, make_doctor):
        doctor = make_doctor()

        response = client.delete(f"/users/{doctor.user_id}", headers=auth_headers(admin))

        assert response.status_code == 200
        assert client.get(f"/doctors/{doctor.id}").status_code == 404

    def test_admin_cannot_delete_self(self, client, auth_headers, admin):
        response = client.delete(f"/users/{admin.id}", headers=auth_headers(admin))

        assert response.status_code == 400

    def test_unknown_user(self, client, auth_headers, admin):
        assert client.delete("/users/999", headers=auth_headers(admin)).status_code == 404

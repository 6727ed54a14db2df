PASSWORD = "secret123"

NEW_STUDENT = {
    "name": "Kavya",
    "email": "kavya@college.edu",
    "password": "pa55word",
    "department": "ECE",
    "year": 2,
    "section": "B",
    "register_no": "22ECE001",
}


class TestAuthRoutes:

    def test_register_then_login(self, client):
        response = client.post("/api/auth/register", json=NEW_STUDENT)
        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "student"
        assert body["token"]
        assert body["user"]["register_no"] == "22ECE001"
        assert "password_hash" not in body["user"]

        response = client.post(
            "/api/auth/login",
            json={"email": NEW_STUDENT["email"], "password": "pa55word", "role": "student"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["email"] == NEW_STUDENT["email"]

    def test_register_duplicate(self, client):
        client.post("/api/auth/register", json=NEW_STUDENT)
        response = client.post("/api/auth/register", json=NEW_STUDENT)
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_register_missing_fields(self, client):
        response = client.post("/api/auth/register", json={"email": "x@college.edu"})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_mentor_credentials_with_student_role(self, client, make_mentor):
        mentor = make_mentor()
        response = client.post(
            "/api/auth/login", json={"email": mentor.email, "password": PASSWORD, "role": "student"}
        )
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid credentials", "error": "invalid_credentials"}

    def test_coordinator_login(self, client, make_coordinator):
        coordinator = make_coordinator()
        response = client.post(
            "/api/auth/login", json={"email": coordinator.email, "password": PASSWORD, "role": "coordinator"}
        )
        assert response.status_code == 200
        assert response.json()["role"] == "coordinator"
        assert response.json()["user"]["id"] == coordinator.id

    def test_unknown_role_rejected(self, client):
        response = client.post(
            "/api/auth/login", json={"email": "a@college.edu", "password": "x", "role": "admin"}
        )
        assert response.status_code == 400

    def test_me(self, client, make_mentor, auth_headers):
        mentor = make_mentor(name="Dr. Rao")
        response = client.get("/api/auth/me", headers=auth_headers(mentor))
        assert response.status_code == 200
        assert response.json()["role"] == "mentor"
        assert response.json()["user"]["name"] == "Dr. Rao"

    def test_me_without_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_me_with_bad_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

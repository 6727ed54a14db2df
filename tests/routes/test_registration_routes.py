from datetime import timedelta


class TestRegistrationRoutes:

    def test_register_and_duplicate(self, client, make_contest, make_student, auth_headers):
        contest = make_contest()
        headers = auth_headers(make_student())

        response = client.post("/api/registrations/", json={"contest_id": contest.id}, headers=headers)
        assert response.status_code == 201
        assert response.json()["registration_id"]

        response = client.post("/api/registrations/", json={"contest_id": contest.id}, headers=headers)
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

        mine = client.get("/api/registrations/my", headers=headers).json()
        assert len(mine) == 1
        assert mine[0]["contest_id"] == contest.id
        assert mine[0]["title"] == contest.title

    def test_closed_registration(self, client, make_contest, make_student, auth_headers):
        contest = make_contest(registration_in=-timedelta(minutes=5))
        response = client.post(
            "/api/registrations/", json={"contest_id": contest.id}, headers=auth_headers(make_student())
        )
        assert response.status_code == 400
        assert response.json()["error"] == "deadline_passed"

    def test_team_contest_rejects_solo_registration(self, client, make_contest, make_student, auth_headers):
        contest = make_contest(team=True, max_team_size=2)
        response = client.post(
            "/api/registrations/", json={"contest_id": contest.id}, headers=auth_headers(make_student())
        )
        assert response.status_code == 400
        assert response.json()["error"] == "wrong_mode"

    def test_cancel(self, client, make_contest, make_student, auth_headers):
        contest = make_contest()
        headers = auth_headers(make_student())
        registration_id = client.post(
            "/api/registrations/", json={"contest_id": contest.id}, headers=headers
        ).json()["registration_id"]

        other = client.delete(f"/api/registrations/{registration_id}", headers=auth_headers(make_student()))
        assert other.status_code == 403

        assert client.delete(f"/api/registrations/{registration_id}", headers=headers).status_code == 200
        assert client.get("/api/registrations/my", headers=headers).json() == []

    def test_roster_is_staff_only(self, client, make_contest, make_student, make_mentor, auth_headers):
        contest = make_contest()
        student = make_student(name="Asha")
        client.post("/api/registrations/", json={"contest_id": contest.id}, headers=auth_headers(student))

        assert client.get(f"/api/registrations/contest/{contest.id}", headers=auth_headers(student)).status_code == 403

        roster = client.get(f"/api/registrations/contest/{contest.id}", headers=auth_headers(make_mentor()))
        assert roster.status_code == 200
        assert [r["student_name"] for r in roster.json()] == ["Asha"]

    def test_register_requires_token(self, client, make_contest):
        contest = make_contest()
        response = client.post("/api/registrations/", json={"contest_id": contest.id})
        assert response.status_code == 401

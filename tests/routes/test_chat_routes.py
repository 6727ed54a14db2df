class TestChatRoutes:

    def test_post_and_read(self, client, make_contest, make_student, auth_headers):
        contest = make_contest()
        student = make_student(name="Meera")
        headers = auth_headers(student)

        response = client.post(f"/api/chat/{contest.id}", json={"message_text": "Hello"}, headers=headers)
        assert response.status_code == 201
        posted = response.json()
        assert posted["sender_role"] == "student"
        assert posted["sender_id"] == student.id
        assert posted["sender_name"] == "Meera"

        page = client.get(f"/api/chat/{contest.id}", headers=headers).json()
        assert page["contest_id"] == contest.id
        assert page["messages"][-1]["message_text"] == "Hello"

    def test_limit_and_before(self, client, make_contest, make_student, auth_headers):
        contest = make_contest()
        headers = auth_headers(make_student())
        ids = [
            client.post(f"/api/chat/{contest.id}", json={"message_text": f"m{i}"}, headers=headers).json()["id"]
            for i in range(4)
        ]

        page = client.get(f"/api/chat/{contest.id}", params={"limit": 2, "before": ids[3]}, headers=headers)
        assert [m["id"] for m in page.json()["messages"]] == ids[1:3]

        bad = client.get(f"/api/chat/{contest.id}", params={"limit": 0}, headers=headers)
        assert bad.status_code == 400

    def test_blank_message(self, client, make_contest, make_student, auth_headers):
        contest = make_contest()
        response = client.post(
            f"/api/chat/{contest.id}", json={"message_text": "   "}, headers=auth_headers(make_student())
        )
        assert response.status_code == 400

    def test_staff_can_post(self, client, make_contest, make_mentor, auth_headers):
        contest = make_contest()
        coordinator_post = client.post(
            f"/api/chat/{contest.id}", json={"message_text": "Welcome"}, headers=auth_headers(contest.creator)
        )
        mentor_post = client.post(
            f"/api/chat/{contest.id}", json={"message_text": "Ask me"}, headers=auth_headers(make_mentor())
        )
        assert coordinator_post.json()["sender_role"] == "coordinator"
        assert mentor_post.json()["sender_role"] == "mentor"

    def test_delete_ownership(self, client, make_contest, make_student, auth_headers):
        contest = make_contest()
        author_headers = auth_headers(make_student())
        message_id = client.post(
            f"/api/chat/{contest.id}", json={"message_text": "mine"}, headers=author_headers
        ).json()["id"]

        response = client.delete(f"/api/chat/message/{message_id}", headers=auth_headers(make_student()))
        assert response.status_code == 403

        response = client.delete(f"/api/chat/message/{message_id}", headers=author_headers)
        assert response.status_code == 200
        assert client.get(f"/api/chat/{contest.id}", headers=author_headers).json()["messages"] == []

    def test_my_groups(self, client, make_contest, make_student, auth_headers):
        contest = make_contest(title="Quiz")
        headers = auth_headers(make_student())
        client.post(f"/api/chat/{contest.id}", json={"message_text": "hey"}, headers=headers)

        groups = client.get("/api/chat/my-groups", headers=headers).json()
        assert [(g["contest_id"], g["title"]) for g in groups] == [(contest.id, "Quiz")]

    def test_chat_requires_token(self, client, make_contest):
        contest = make_contest()
        assert client.get(f"/api/chat/{contest.id}").status_code == 401

    def test_chat_for_missing_contest(self, client, make_student, auth_headers):
        response = client.get("/api/chat/999", headers=auth_headers(make_student()))
        assert response.status_code == 404

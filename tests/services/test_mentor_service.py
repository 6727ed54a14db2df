import pytest

from app.core.exceptions import Conflict, NotFound
from app.schemas.user_schemas import MentorCreate
from app.services import auth_service, mentor_service, team_service


class TestMentors:

    def test_create_and_list(self, db):
        mentor_service.create_mentor(
            db, MentorCreate(name="Zara", email="zara@college.edu", password="pw", department="IT")
        )
        mentor_service.create_mentor(
            db, MentorCreate(name="Arun", email="arun@college.edu", password="pw", department="CSE")
        )

        assert [m.name for m in mentor_service.list_mentors(db)] == ["Arun", "Zara"]

    def test_duplicate_email(self, db, make_mentor):
        make_mentor(email="dup@college.edu")
        with pytest.raises(Conflict):
            mentor_service.create_mentor(
                db, MentorCreate(name="Dup", email="dup@college.edu", password="pw", department="IT")
            )

    def test_assign_to_contest(self, db, make_contest, make_mentor):
        contest = make_contest()
        mentor = make_mentor()

        mentor_service.assign_to_contest(db, contest.id, mentor.id)

        contests = mentor_service.list_my_contests(db, mentor.id)
        assert [c["id"] for c in contests] == [contest.id]
        assert contests[0]["mentor_name"] == mentor.name

    def test_assign_to_team(self, db, make_contest, make_student, make_mentor):
        contest = make_contest(team=True, max_team_size=2)
        team = team_service.create_team(db, contest.id, make_student().id, "Alpha")
        mentor = make_mentor(name="Guide")

        mentor_service.assign_to_team(db, team.id, mentor.id)

        teams = mentor_service.list_my_teams(db, mentor.id)
        assert [t["team_name"] for t in teams] == ["Alpha"]
        assert teams[0]["mentor_name"] == "Guide"

    def test_assign_unknown_mentor(self, db, make_contest):
        contest = make_contest()
        with pytest.raises(NotFound):
            mentor_service.assign_to_contest(db, contest.id, 404)

    def test_assign_unknown_team(self, db, make_mentor):
        with pytest.raises(NotFound):
            mentor_service.assign_to_team(db, 404, make_mentor().id)

    def test_duplicate_slipping_past_lookup_is_conflict(self, db, make_mentor, monkeypatch):
        make_mentor(email="dup@college.edu")
        monkeypatch.setattr(auth_service, "get_user_by_email", lambda *args: None)

        with pytest.raises(Conflict):
            mentor_service.create_mentor(
                db, MentorCreate(name="Dup", email="dup@college.edu", password="pw", department="IT")
            )
        assert [m.email for m in mentor_service.list_mentors(db)] == ["dup@college.edu"]

import pytest
from datetime import datetime, timedelta, timezone

import pydantic

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models import Contest, Registration, Team, TeamMember
from app.schemas.contest_schemas import ContestCreate, ContestUpdate
from app.services import contest_service, registration_service, team_service


def _contest_in(**overrides):
    now = datetime.utcnow()
    data = {
        "title": "Hack Night",
        "registration_deadline": now + timedelta(days=1),
        "submission_deadline": now + timedelta(days=3),
    }
    data.update(overrides)
    return ContestCreate(**data)


class TestCreateContest:

    def test_create_contest_with_chat(self, db, make_coordinator):
        coordinator = make_coordinator()

        contest = contest_service.create_contest(db, _contest_in(), creator_id=coordinator.id)

        assert contest.id is not None
        assert contest.created_by == coordinator.id
        assert contest.chat is not None
        assert contest.is_team_based is False
        assert contest.max_team_size == 1

    def test_deadlines_must_be_ordered(self):
        now = datetime.utcnow()
        with pytest.raises(pydantic.ValidationError):
            _contest_in(registration_deadline=now + timedelta(days=2), submission_deadline=now + timedelta(days=1))

    def test_aware_deadlines_stored_as_utc(self, db, make_coordinator):
        ist = timezone(timedelta(hours=5, minutes=30))
        contest_in = _contest_in(
            registration_deadline=datetime(2031, 1, 1, 10, 0, tzinfo=ist),
            submission_deadline=datetime(2031, 1, 5, 10, 0, tzinfo=ist),
        )
        contest = contest_service.create_contest(db, contest_in, creator_id=make_coordinator().id)
        assert contest.registration_deadline == datetime(2031, 1, 1, 4, 30)

    def test_unknown_mentor(self, db, make_coordinator):
        with pytest.raises(NotFound):
            contest_service.create_contest(db, _contest_in(mentor_id=99), creator_id=make_coordinator().id)


class TestDeadlineRule:

    def test_open_until_the_deadline_instant(self, make_contest):
        contest = make_contest()
        deadline = contest.registration_deadline
        assert contest_service.registration_closed(contest, deadline - timedelta(microseconds=1)) is False
        assert contest_service.registration_closed(contest, deadline) is False
        assert contest_service.registration_closed(contest, deadline + timedelta(microseconds=1)) is True


class TestReadContests:

    def test_list_includes_counts_and_names(self, db, make_contest, make_student, make_coordinator):
        coordinator = make_coordinator(name="Prof. Iyer")
        contest = make_contest(coordinator=coordinator)
        registration_service.register_individual(db, contest.id, make_student().id)
        registration_service.register_individual(db, contest.id, make_student().id)

        rows = contest_service.list_contests(db)

        assert len(rows) == 1
        assert rows[0]["coordinator_name"] == "Prof. Iyer"
        assert rows[0]["registration_count"] == 2
        assert rows[0]["mentor_name"] is None

    def test_list_ordered_by_registration_deadline_desc(self, make_contest, db):
        soon = make_contest(title="Soon", registration_in=timedelta(hours=1))
        later = make_contest(title="Later", registration_in=timedelta(days=2))

        assert [row["id"] for row in contest_service.list_contests(db)] == [later.id, soon.id]

    def test_detail_lists_teams_for_team_contest(self, db, make_contest, make_student):
        contest = make_contest(team=True, max_team_size=3)
        team_service.create_team(db, contest.id, make_student().id, "Alpha")

        detail = contest_service.get_contest_detail(db, contest.id)

        assert detail["coordinator_email"] == contest.creator.email
        assert [t["team_name"] for t in detail["teams"]] == ["Alpha"]
        assert detail["registration_count"] == 1

    def test_detail_missing(self, db):
        with pytest.raises(NotFound):
            contest_service.get_contest_detail(db, 1)


class TestUpdateContest:

    def test_owner_updates_partially(self, db, make_contest):
        contest = make_contest(description="old")

        updated = contest_service.update_contest(
            db, contest.id, ContestUpdate(title="Renamed"), current_user_id=contest.created_by
        )

        assert updated.title == "Renamed"
        assert updated.description == "old"

    def test_other_coordinator_forbidden(self, db, make_contest, make_coordinator):
        contest = make_contest()
        with pytest.raises(Forbidden):
            contest_service.update_contest(
                db, contest.id, ContestUpdate(title="Mine now"), current_user_id=make_coordinator().id
            )

    def test_update_cannot_invert_deadlines(self, db, make_contest):
        contest = make_contest()
        with pytest.raises(ValidationError):
            contest_service.update_contest(
                db,
                contest.id,
                ContestUpdate(registration_deadline=contest.submission_deadline + timedelta(days=1)),
                current_user_id=contest.created_by,
            )

    def test_required_field_cannot_be_cleared(self, db, make_contest):
        contest = make_contest()
        with pytest.raises(ValidationError):
            contest_service.update_contest(
                db, contest.id, ContestUpdate(title=None), current_user_id=contest.created_by
            )


class TestDeleteContest:

    def test_delete_cascades(self, db, make_contest, make_student):
        solo = make_contest()
        teamed = make_contest(team=True, max_team_size=2, coordinator=solo.creator)
        registration_service.register_individual(db, solo.id, make_student().id)
        team = team_service.create_team(db, teamed.id, make_student().id, "Alpha")
        team_service.join_team(db, team.id, make_student().id)

        contest_service.delete_contest(db, teamed.id, teamed.created_by)

        with pytest.raises(NotFound):
            contest_service.get_contest(db, teamed.id)
        assert db.query(Team).count() == 0
        assert db.query(TeamMember).count() == 0
        assert db.query(Registration).filter_by(contest_id=teamed.id).count() == 0
        assert db.query(Registration).filter_by(contest_id=solo.id).count() == 1

    def test_delete_other_coordinators_contest(self, db, make_contest, make_coordinator):
        contest = make_contest()
        with pytest.raises(Forbidden):
            contest_service.delete_contest(db, contest.id, make_coordinator().id)
        assert db.query(Contest).filter(Contest.id == contest.id).first() is not None

    def test_delete_missing(self, db, make_coordinator):
        with pytest.raises(NotFound):
            contest_service.delete_contest(db, 77, make_coordinator().id)

import pytest
from sqlalchemy.exc import IntegrityError

from mentor_match.models import MentorMatch, MenteeProfile, MatchStatus
from mentor_match.exceptions import (
    ProfileNotFoundError,
    MentorNotFoundError,
    MentorAtCapacityError,
    DuplicateRequestError,
    MatchNotFoundOrUnauthorizedError,
    InvalidStatusTransitionError,
    InvalidInputError,
)


class TestRequestMentorship:
    def test_creates_pending_match_without_touching_capacity(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor()
        mentee_user, mentee = make_mentee()

        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Please mentor me")

        assert match.status == MatchStatus.PENDING.value
        assert match.mentor_id == mentor.id
        assert match.mentee_id == mentee.id
        assert match.request_message == "Please mentor me"
        assert 0 <= match.match_score <= 100
        assert match.matched_at is None
        db.refresh(mentor)
        assert mentor.current_mentee_count == 0

    def test_requires_mentee_profile(self, make_mentor, make_user, mentorship):
        mentor_user, _ = make_mentor()
        stranger = make_user()
        with pytest.raises(ProfileNotFoundError):
            mentorship.request_mentorship(stranger.id, mentor_user.id, "Hello")

    def test_unknown_mentor(self, make_mentee, make_user, mentorship):
        mentee_user, _ = make_mentee()
        not_a_mentor = make_user()
        with pytest.raises(MentorNotFoundError):
            mentorship.request_mentorship(mentee_user.id, not_a_mentor.id, "Hello")

    def test_inactive_mentor_is_not_found(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor(is_active=False)
        mentee_user, _ = make_mentee()
        with pytest.raises(MentorNotFoundError):
            mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hello")

    @pytest.mark.parametrize("message", ["", "   ", None])
    def test_message_is_required(self, make_mentor, make_mentee, mentorship, message):
        mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        with pytest.raises(InvalidInputError):
            mentorship.request_mentorship(mentee_user.id, mentor_user.id, message)

    def test_cannot_request_yourself(self, db, make_mentor, mentorship):
        mentor_user, _ = make_mentor()
        db.add(MenteeProfile(user_id=mentor_user.id))
        db.commit()
        with pytest.raises(InvalidInputError):
            mentorship.request_mentorship(mentor_user.id, mentor_user.id, "Hello me")

    def test_full_mentor_rejects_new_requests(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor(max_mentees=1, current_mentee_count=1)
        mentee_user, _ = make_mentee()
        with pytest.raises(MentorAtCapacityError):
            mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hello")

    def test_duplicate_while_pending(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        mentorship.request_mentorship(mentee_user.id, mentor_user.id, "First")
        with pytest.raises(DuplicateRequestError):
            mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Second")

    def test_duplicate_while_accepted(self, accepted_match, mentorship):
        mentor_user, mentee_user, _ = accepted_match
        with pytest.raises(DuplicateRequestError):
            mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Again")

    def test_new_request_allowed_after_decline(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        first = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "First")
        mentorship.respond_to_request(mentor_user.id, first.id, "declined", "Not now")

        second = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Trying again")
        assert second.id != first.id
        assert second.status == MatchStatus.PENDING.value

    def test_new_request_allowed_after_completion(self, accepted_match, mentorship):
        mentor_user, mentee_user, match = accepted_match
        mentorship.complete_mentorship(mentee_user.id, match.id)

        again = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Round two?")
        assert again.status == MatchStatus.PENDING.value

    def test_storage_rejects_second_open_match_for_pair(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor()
        mentee_user, mentee = make_mentee()
        mentorship.request_mentorship(mentee_user.id, mentor_user.id, "First")

        # Bypass the service check, as a concurrent request would
        db.add(MentorMatch(
            mentor_id=mentor.id, mentee_id=mentee.id,
            status=MatchStatus.PENDING.value, match_score=50, request_message="Racing",
        ))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()


class TestRespondToRequest:
    def test_accept(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Please mentor me")

        match = mentorship.respond_to_request(mentor_user.id, match.id, "accepted", "Happy to help")

        assert match.status == MatchStatus.ACCEPTED.value
        assert match.response_message == "Happy to help"
        assert match.matched_at is not None
        db.refresh(mentor)
        assert mentor.current_mentee_count == 1

    def test_decline_keeps_counter(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Please mentor me")

        match = mentorship.respond_to_request(mentor_user.id, match.id, "declined", "Fully booked")

        assert match.status == MatchStatus.DECLINED.value
        assert match.response_message == "Fully booked"
        assert match.matched_at is None
        db.refresh(mentor)
        assert mentor.current_mentee_count == 0

    def test_requires_mentor_profile(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
        with pytest.raises(ProfileNotFoundError):
            mentorship.respond_to_request(mentee_user.id, match.id, "accepted", None)

    def test_other_mentor_cannot_respond(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor()
        other_mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
        with pytest.raises(MatchNotFoundOrUnauthorizedError):
            mentorship.respond_to_request(other_mentor_user.id, match.id, "accepted", None)

    def test_missing_match_looks_like_unauthorized(self, make_mentor, mentorship):
        mentor_user, _ = make_mentor()
        with pytest.raises(MatchNotFoundOrUnauthorizedError):
            mentorship.respond_to_request(mentor_user.id, 9999, "accepted", None)

    @pytest.mark.parametrize("decision", ["maybe", "active", "completed", "pending", ""])
    def test_invalid_decision(self, make_mentor, make_mentee, mentorship, decision):
        mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
        with pytest.raises(InvalidInputError):
            mentorship.respond_to_request(mentor_user.id, match.id, decision, None)

    def test_cannot_respond_twice(self, db, accepted_match, mentorship):
        mentor_user, _, match = accepted_match
        with pytest.raises(InvalidStatusTransitionError):
            mentorship.respond_to_request(mentor_user.id, match.id, "declined", "Changed my mind")
        db.refresh(match)
        assert match.status == MatchStatus.ACCEPTED.value


class TestCapacity:
    def test_request_fails_once_mentor_is_full(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor(max_mentees=2)
        for _ in range(2):
            mentee_user, _ = make_mentee()
            match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
            mentorship.respond_to_request(mentor_user.id, match.id, "accepted", None)

        late_user, _ = make_mentee()
        with pytest.raises(MentorAtCapacityError):
            mentorship.request_mentorship(late_user.id, mentor_user.id, "Hi")
        db.refresh(mentor)
        assert mentor.current_mentee_count == 2

    def test_accept_beyond_capacity_fails_and_changes_nothing(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor(max_mentees=2)
        matches = []
        for _ in range(3):
            mentee_user, _ = make_mentee()
            matches.append(mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi"))

        mentorship.respond_to_request(mentor_user.id, matches[0].id, "accepted", None)
        mentorship.respond_to_request(mentor_user.id, matches[1].id, "accepted", None)
        with pytest.raises(MentorAtCapacityError):
            mentorship.respond_to_request(mentor_user.id, matches[2].id, "accepted", None)

        db.refresh(mentor)
        overflow = db.get(MentorMatch, matches[2].id)
        assert mentor.current_mentee_count == 2
        assert overflow.status == MatchStatus.PENDING.value
        assert overflow.matched_at is None

    def test_overflow_request_can_still_be_declined(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor(max_mentees=1)
        first_user, _ = make_mentee()
        second_user, _ = make_mentee()
        first = mentorship.request_mentorship(first_user.id, mentor_user.id, "Hi")
        second = mentorship.request_mentorship(second_user.id, mentor_user.id, "Hi")
        mentorship.respond_to_request(mentor_user.id, first.id, "accepted", None)

        declined = mentorship.respond_to_request(mentor_user.id, second.id, "declined", "No room")
        assert declined.status == MatchStatus.DECLINED.value


class TestCompleteMentorship:
    def test_mentor_completes(self, db, accepted_match, mentorship):
        mentor_user, _, match = accepted_match

        match = mentorship.complete_mentorship(mentor_user.id, match.id)

        assert match.status == MatchStatus.COMPLETED.value
        assert match.completed_at is not None
        db.refresh(match.mentor)
        assert match.mentor.current_mentee_count == 0

    def test_mentee_completes(self, accepted_match, mentorship):
        _, mentee_user, match = accepted_match
        match = mentorship.complete_mentorship(mentee_user.id, match.id)
        assert match.status == MatchStatus.COMPLETED.value

    def test_active_match_completes(self, accepted_match, mentorship, chat):
        mentor_user, mentee_user, match = accepted_match
        chat.send_message(mentee_user.id, match.id, "Hi!")
        match = mentorship.complete_mentorship(mentor_user.id, match.id)
        assert match.status == MatchStatus.COMPLETED.value

    def test_double_completion_decrements_once(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor(max_mentees=3)
        accepted = []
        for _ in range(2):
            mentee_user, _ = make_mentee()
            match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
            accepted.append(mentorship.respond_to_request(mentor_user.id, match.id, "accepted", None))
        db.refresh(mentor)
        assert mentor.current_mentee_count == 2

        mentorship.complete_mentorship(mentor_user.id, accepted[0].id)
        with pytest.raises(InvalidStatusTransitionError):
            mentorship.complete_mentorship(mentor_user.id, accepted[0].id)

        db.refresh(mentor)
        assert mentor.current_mentee_count == 1

    def test_counter_never_goes_negative(self, db, accepted_match, mentorship):
        mentor_user, _, match = accepted_match
        mentor = match.mentor
        mentor.current_mentee_count = 0
        db.commit()

        mentorship.complete_mentorship(mentor_user.id, match.id)
        db.refresh(mentor)
        assert mentor.current_mentee_count == 0

    def test_pending_match_cannot_complete(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
        with pytest.raises(InvalidStatusTransitionError):
            mentorship.complete_mentorship(mentee_user.id, match.id)

    def test_third_party_cannot_complete(self, accepted_match, make_mentee, mentorship):
        _, _, match = accepted_match
        outsider, _ = make_mentee()
        with pytest.raises(MatchNotFoundOrUnauthorizedError):
            mentorship.complete_mentorship(outsider.id, match.id)

    def test_user_without_profiles_cannot_complete(self, accepted_match, make_user, mentorship):
        _, _, match = accepted_match
        with pytest.raises(MatchNotFoundOrUnauthorizedError):
            mentorship.complete_mentorship(make_user().id, match.id)


class TestTerminalStates:
    def test_declined_is_final(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
        mentorship.respond_to_request(mentor_user.id, match.id, "declined", None)

        with pytest.raises(InvalidStatusTransitionError):
            mentorship.respond_to_request(mentor_user.id, match.id, "accepted", None)
        with pytest.raises(InvalidStatusTransitionError):
            mentorship.complete_mentorship(mentor_user.id, match.id)
        db.refresh(match)
        assert match.status == MatchStatus.DECLINED.value

    def test_completed_is_final(self, db, accepted_match, mentorship):
        mentor_user, mentee_user, match = accepted_match
        mentorship.complete_mentorship(mentee_user.id, match.id)

        with pytest.raises(InvalidStatusTransitionError):
            mentorship.respond_to_request(mentor_user.id, match.id, "accepted", None)
        with pytest.raises(InvalidStatusTransitionError):
            mentorship.complete_mentorship(mentor_user.id, match.id)
        db.refresh(match)
        assert match.status == MatchStatus.COMPLETED.value


class TestListings:
    def test_available_mentors_exclude_self_and_inactive(self, db, make_mentor, make_mentee, mentorship):
        me, _ = make_mentor()
        other_user, other = make_mentor()
        make_mentor(is_active=False)
        mentee_user, _ = make_mentee()

        for_mentor = mentorship.list_available_mentors(me.id)
        assert [profile.id for profile, _ in for_mentor] == [other.id]

        for_mentee = mentorship.list_available_mentors(mentee_user.id)
        assert len(for_mentee) == 2
        assert all(0 <= score <= 100 for _, score in for_mentee)

    def test_available_mentors_sorted_by_score(self, make_mentor, make_user, mentorship):
        _, full = make_mentor(max_mentees=1, current_mentee_count=1)
        _, open_ = make_mentor(max_mentees=3)
        scored = mentorship.list_available_mentors(make_user().id)
        assert [profile.id for profile, _ in scored] == [open_.id, full.id]
        assert scored[0][1] > scored[1][1]

    def test_available_mentors_empty(self, make_user, mentorship):
        assert mentorship.list_available_mentors(make_user().id) == []

    def test_score_is_not_persisted_on_listing(self, db, make_mentor, make_mentee, mentorship):
        mentor_user, mentor = make_mentor()
        mentee_user, _ = make_mentee()
        match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Hi")
        snapshot = match.match_score

        mentor.years_of_experience = 0
        mentor.areas_of_strength = []
        db.commit()
        listed = dict((p.id, s) for p, s in mentorship.list_available_mentors(mentee_user.id))

        db.refresh(match)
        assert match.match_score == snapshot
        assert listed[mentor.id] != snapshot

    def test_matches_for_user_newest_first(self, make_mentor, make_mentee, mentorship):
        mentor_user, _ = make_mentor()
        mentee_a, _ = make_mentee()
        mentee_b, _ = make_mentee()
        first = mentorship.request_mentorship(mentee_a.id, mentor_user.id, "A")
        second = mentorship.request_mentorship(mentee_b.id, mentor_user.id, "B")

        matches = mentorship.list_matches_for_user(mentor_user.id)
        assert [m.id for m in matches] == [second.id, first.id]
        assert mentorship.list_matches_for_user(mentee_a.id)[0].id == first.id

    def test_matches_cover_both_roles(self, db, make_mentor, make_mentee, mentorship):
        dual_user, _ = make_mentor()
        db.add(MenteeProfile(user_id=dual_user.id))
        db.commit()
        other_mentor_user, _ = make_mentor()
        mentee_user, _ = make_mentee()

        as_mentee = mentorship.request_mentorship(dual_user.id, other_mentor_user.id, "Teach me")
        as_mentor = mentorship.request_mentorship(mentee_user.id, dual_user.id, "Teach me too")

        ids = {m.id for m in mentorship.list_matches_for_user(dual_user.id)}
        assert ids == {as_mentee.id, as_mentor.id}

    def test_matches_empty_without_profiles(self, make_user, mentorship):
        assert mentorship.list_matches_for_user(make_user().id) == []

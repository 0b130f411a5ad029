# mentor_match/services/mentorship_service.py
import logging
from typing import List, Optional, Tuple
from datetime import datetime, timezone
from sqlalchemy import or_, update
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..models import (
    MentorMatch, MentorProfile, MenteeProfile, User, MatchStatus,
    ENGAGED_STATUSES,
)
from ..constants import ErrorMessages, BusinessRules
from ..exceptions import (
    BusinessLogicError,
    ProfileNotFoundError,
    MentorNotFoundError,
    MentorAtCapacityError,
    DuplicateRequestError,
    InvalidStatusTransitionError,
    InvalidInputError,
)
from ..scoring import calculate_match_score
from ..utils.validation_utils import ValidationUtils
from .profile_service import ProfileService

logger = logging.getLogger(__name__)

class MentorshipService:
    """Owns the mentor/mentee match lifecycle.

    pending --accept--> accepted --first message--> active --complete--> completed
    pending --decline--> declined;  accepted --complete--> completed
    """

    def __init__(self, db: Session, profiles: Optional[ProfileService] = None):
        self.db = db
        self.profiles = profiles or ProfileService(db)
        self.validator = ValidationUtils(db)

    def list_available_mentors(self, requesting_user_id: int) -> List[Tuple[MentorProfile, int]]:
        """Active mentors other than the requester, each with a fresh display score"""
        mentors = self.db.query(MentorProfile).join(MentorProfile.user).options(
            joinedload(MentorProfile.user)
        ).filter(
            MentorProfile.user_id != requesting_user_id,
            MentorProfile.is_active == True,
            User.is_active == True,
        ).all()

        scored = [(mentor, calculate_match_score(mentor)) for mentor in mentors]
        scored.sort(key=lambda pair: (-pair[1], pair[0].id))
        return scored

    def list_matches_for_user(self, user_id: int) -> List[MentorMatch]:
        """All matches the user takes part in as mentor or mentee, newest first"""
        mentor, mentee = self.profiles.get_profiles(user_id)
        conditions = self.validator.party_conditions(mentor, mentee)
        if not conditions:
            return []

        return self.db.query(MentorMatch).options(
            joinedload(MentorMatch.mentor).joinedload(MentorProfile.user),
            joinedload(MentorMatch.mentee).joinedload(MenteeProfile.user),
        ).filter(or_(*conditions)).order_by(
            MentorMatch.created_at.desc(), MentorMatch.id.desc()
        ).all()

    def request_mentorship(self, mentee_user_id: int, mentor_user_id: int, message: str) -> MentorMatch:
        """Creates a pending match. The mentor's counter is untouched until acceptance."""
        mentee = self.profiles.find_mentee_profile_by_user_id(mentee_user_id)
        if not mentee:
            raise ProfileNotFoundError(ErrorMessages.MENTEE_PROFILE_NOT_FOUND)

        mentor = self.profiles.find_mentor_profile_by_user_id(mentor_user_id)
        if not mentor or not mentor.is_active:
            raise MentorNotFoundError(ErrorMessages.MENTOR_NOT_FOUND)
        if mentor.user_id == mentee_user_id:
            raise InvalidInputError(ErrorMessages.SELF_REQUEST)

        message = self.validator.require_text(
            message, ErrorMessages.EMPTY_REQUEST_MESSAGE, BusinessRules.MAX_REQUEST_MESSAGE_LENGTH
        )
        self.validator.validate_mentor_capacity(mentor)
        self.validator.check_no_open_request(mentee.id, mentor.id)

        match = MentorMatch(
            mentor_id=mentor.id,
            mentee_id=mentee.id,
            status=MatchStatus.PENDING.value,
            match_score=calculate_match_score(mentor),
            request_message=message,
        )
        try:
            self.db.add(match)
            self.db.commit()
        except IntegrityError as e:
            # A concurrent request for the same pair won the partial unique index
            self.db.rollback()
            logger.info(f"Duplicate request rejected by constraint for mentor {mentor.id}, mentee {mentee.id}: {e}")
            raise DuplicateRequestError(ErrorMessages.DUPLICATE_REQUEST)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error creating match for mentor {mentor.id}, mentee {mentee.id}: {e}")
            raise BusinessLogicError(ErrorMessages.DATABASE_ERROR)

        self.db.refresh(match)
        logger.info(f"Match {match.id} requested: mentee {mentee.id} -> mentor {mentor.id} (score {match.match_score})")
        return match

    def respond_to_request(self, mentor_user_id: int, match_id: int, decision: str, message: Optional[str] = None) -> MentorMatch:
        """Mentor accepts or declines a pending request"""
        mentor = self.profiles.find_mentor_profile_by_user_id(mentor_user_id)
        if not mentor:
            raise ProfileNotFoundError(ErrorMessages.MENTOR_PROFILE_NOT_FOUND)

        new_status = self.validator.validate_decision(decision)
        match = self.validator.get_match_for_party_or_404(match_id, mentor=mentor)
        self._require_status(match, (MatchStatus.PENDING,))

        values = {"status": new_status.value, "response_message": message}
        if new_status == MatchStatus.ACCEPTED:
            values["matched_at"] = datetime.now(timezone.utc)

        try:
            self._transition(match, (MatchStatus.PENDING,), **values)
            if new_status == MatchStatus.ACCEPTED:
                # Capacity is re-checked in the same statement as the increment
                if not self.profiles.increment_mentee_count(mentor.id, 1):
                    raise MentorAtCapacityError(ErrorMessages.MENTOR_AT_CAPACITY)
            self.db.commit()
        except BusinessLogicError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error responding to match {match_id}: {e}")
            raise BusinessLogicError(ErrorMessages.DATABASE_ERROR)

        self.db.refresh(match)
        logger.info(f"Match {match.id} {new_status.value} by mentor {mentor.id}")
        return match

    def complete_mentorship(self, user_id: int, match_id: int) -> MentorMatch:
        """Either party ends an accepted or active mentorship and frees the mentor's slot"""
        mentor, mentee = self.profiles.get_profiles(user_id)
        match = self.validator.get_match_for_party_or_404(match_id, mentor=mentor, mentee=mentee)
        self._require_status(match, ENGAGED_STATUSES)

        try:
            self._transition(
                match,
                ENGAGED_STATUSES,
                status=MatchStatus.COMPLETED.value,
                completed_at=datetime.now(timezone.utc),
            )
            self.profiles.increment_mentee_count(match.mentor_id, -1)
            self.db.commit()
        except BusinessLogicError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error completing match {match_id}: {e}")
            raise BusinessLogicError(ErrorMessages.DATABASE_ERROR)

        self.db.refresh(match)
        logger.info(f"Match {match.id} completed by user {user_id}")
        return match

    def mark_active(self, match: MentorMatch) -> bool:
        """
        Moves an accepted match to active. Part of the caller's transaction;
        a no-op when another request already activated it.
        """
        result = self.db.execute(
            update(MentorMatch)
            .where(MentorMatch.id == match.id, MentorMatch.status == MatchStatus.ACCEPTED.value)
            .values(status=MatchStatus.ACTIVE.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _require_status(self, match: MentorMatch, allowed: tuple):
        if match.status not in [s.value for s in allowed]:
            raise InvalidStatusTransitionError(
                f"{ErrorMessages.INVALID_TRANSITION} (current: {match.status})"
            )

    def _transition(self, match: MentorMatch, from_statuses: tuple, **values):
        # Conditional update: only one of several racing transitions can match the row
        result = self.db.execute(
            update(MentorMatch)
            .where(
                MentorMatch.id == match.id,
                MentorMatch.status.in_([s.value for s in from_statuses]),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvalidStatusTransitionError(ErrorMessages.INVALID_TRANSITION)

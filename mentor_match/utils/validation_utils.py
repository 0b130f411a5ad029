from typing import Optional, List
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from ..models import MentorProfile, MenteeProfile, MentorMatch, MatchStatus, MessageType, OPEN_STATUSES
from ..constants import ErrorMessages
from ..exceptions import (
    MentorAtCapacityError,
    DuplicateRequestError,
    InvalidInputError,
    MatchNotFoundOrUnauthorizedError,
)

class ValidationUtils:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def party_conditions(mentor: Optional[MentorProfile], mentee: Optional[MenteeProfile]) -> List:
        """SQL conditions matching any match the given profiles take part in."""
        conditions = []
        if mentor is not None:
            conditions.append(MentorMatch.mentor_id == mentor.id)
        if mentee is not None:
            conditions.append(MentorMatch.mentee_id == mentee.id)
        return conditions

    def find_match_for_party(
        self,
        match_id: int,
        mentor: Optional[MentorProfile] = None,
        mentee: Optional[MenteeProfile] = None,
        statuses: Optional[tuple] = None,
    ) -> Optional[MentorMatch]:
        conditions = self.party_conditions(mentor, mentee)
        if not conditions:
            return None

        query = self.db.query(MentorMatch).options(
            joinedload(MentorMatch.mentor),
            joinedload(MentorMatch.mentee),
        ).filter(MentorMatch.id == match_id, or_(*conditions))
        if statuses:
            query = query.filter(MentorMatch.status.in_([s.value for s in statuses]))
        return query.first()

    def get_match_for_party_or_404(
        self,
        match_id: int,
        mentor: Optional[MentorProfile] = None,
        mentee: Optional[MenteeProfile] = None,
    ) -> MentorMatch:
        # Same error for "missing" and "not yours" so other users' matches don't leak
        match = self.find_match_for_party(match_id, mentor, mentee)
        if not match:
            raise MatchNotFoundOrUnauthorizedError(ErrorMessages.MATCH_NOT_FOUND)
        return match

    def validate_mentor_capacity(self, mentor: MentorProfile):
        if mentor.current_mentee_count >= mentor.max_mentees:
            raise MentorAtCapacityError(ErrorMessages.MENTOR_AT_CAPACITY)

    def check_no_open_request(self, mentee_id: int, mentor_id: int):
        existing = self.db.query(MentorMatch).filter(
            MentorMatch.mentee_id == mentee_id,
            MentorMatch.mentor_id == mentor_id,
            MentorMatch.status.in_([s.value for s in OPEN_STATUSES])
        ).first()

        if existing:
            raise DuplicateRequestError(ErrorMessages.DUPLICATE_REQUEST)

    @staticmethod
    def require_text(value: Optional[str], error_message: str, max_length: int) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise InvalidInputError(error_message)
        if len(cleaned) > max_length:
            raise InvalidInputError(f"{ErrorMessages.MESSAGE_TOO_LONG} (max {max_length} characters)")
        return cleaned

    @staticmethod
    def validate_decision(decision: str) -> MatchStatus:
        if decision not in (MatchStatus.ACCEPTED.value, MatchStatus.DECLINED.value):
            raise InvalidInputError(ErrorMessages.INVALID_DECISION)
        return MatchStatus(decision)

    @staticmethod
    def validate_message_type(message_type: Optional[str]) -> MessageType:
        if message_type is None:
            return MessageType.TEXT
        try:
            return MessageType(message_type)
        except ValueError:
            raise InvalidInputError(ErrorMessages.INVALID_MESSAGE_TYPE)

# mentor_match/services/profile_service.py
from typing import Dict, Any, Optional, Tuple
from sqlalchemy import update, case
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from ..models import MentorProfile, MenteeProfile
from ..config import get_settings
from ..constants import ErrorMessages
from ..exceptions import ProfileAlreadyExistsError, BusinessLogicError, InvalidInputError

logger = logging.getLogger(__name__)

class ProfileService:
    """Identity & profile store: role capability records hanging off a user."""

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def find_mentor_profile_by_user_id(self, user_id: int) -> Optional[MentorProfile]:
        return self.db.query(MentorProfile).filter(MentorProfile.user_id == user_id).first()

    def find_mentee_profile_by_user_id(self, user_id: int) -> Optional[MenteeProfile]:
        return self.db.query(MenteeProfile).filter(MenteeProfile.user_id == user_id).first()

    def get_profiles(self, user_id: int) -> Tuple[Optional[MentorProfile], Optional[MenteeProfile]]:
        """Returns whichever of (mentor, mentee) profiles the user holds."""
        return (
            self.find_mentor_profile_by_user_id(user_id),
            self.find_mentee_profile_by_user_id(user_id),
        )

    def increment_mentee_count(self, mentor_profile_id: int, delta: int) -> bool:
        """
        Atomically adjusts a mentor's current_mentee_count at the storage layer.

        Positive deltas only apply while the result stays within max_mentees;
        negative deltas floor at zero. Does not commit: the caller owns the
        transaction so the counter moves together with the status change.

        Returns:
            bool: True if the row was updated.
        """
        count = MentorProfile.current_mentee_count
        stmt = update(MentorProfile).where(MentorProfile.id == mentor_profile_id)
        if delta >= 0:
            stmt = stmt.where(count + delta <= MentorProfile.max_mentees).values(
                current_mentee_count=count + delta
            )
        else:
            stmt = stmt.values(
                current_mentee_count=case((count + delta < 0, 0), else_=count + delta)
            )
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount == 1

    def create_mentor_profile(self, user_id: int, data: Dict[str, Any]) -> MentorProfile:
        """Creates the mentor capability record for a user"""
        if self.find_mentor_profile_by_user_id(user_id):
            raise ProfileAlreadyExistsError(ErrorMessages.DUPLICATE_MENTOR_PROFILE)

        prepared = {k: v for k, v in data.items() if v is not None}
        prepared.setdefault("max_mentees", self.settings.MENTOR_DEFAULT_MAX_MENTEES)
        prepared.pop("current_mentee_count", None)

        mentor = MentorProfile(user_id=user_id, current_mentee_count=0, **prepared)
        return self._save_new(mentor, ErrorMessages.DUPLICATE_MENTOR_PROFILE)

    def create_mentee_profile(self, user_id: int, data: Dict[str, Any]) -> MenteeProfile:
        """Creates the mentee capability record for a user"""
        if self.find_mentee_profile_by_user_id(user_id):
            raise ProfileAlreadyExistsError(ErrorMessages.DUPLICATE_MENTEE_PROFILE)

        prepared = {k: v for k, v in data.items() if v is not None}
        mentee = MenteeProfile(user_id=user_id, **prepared)
        return self._save_new(mentee, ErrorMessages.DUPLICATE_MENTEE_PROFILE)

    def update_mentor_profile(self, mentor: MentorProfile, data: Dict[str, Any]) -> MentorProfile:
        """Partially updates a mentor profile. The live counter is not writable here."""
        data = {k: v for k, v in data.items() if v is not None and k != "current_mentee_count"}
        new_max = data.get("max_mentees")
        if new_max is not None and new_max < mentor.current_mentee_count:
            raise InvalidInputError(ErrorMessages.MAX_MENTEES_BELOW_CURRENT)
        return self._apply_update(mentor, data)

    def update_mentee_profile(self, mentee: MenteeProfile, data: Dict[str, Any]) -> MenteeProfile:
        """Partially updates a mentee profile"""
        data = {k: v for k, v in data.items() if v is not None}
        return self._apply_update(mentee, data)

    def _save_new(self, profile, duplicate_message: str):
        try:
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(profile)
            logger.info(f"{type(profile).__name__} {profile.id} created for user {profile.user_id}")
            return profile
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Database integrity error creating {type(profile).__name__}: {e}")
            raise ProfileAlreadyExistsError(duplicate_message)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error creating {type(profile).__name__}: {e}")
            raise BusinessLogicError(ErrorMessages.DATABASE_ERROR)

    def _apply_update(self, profile, data: Dict[str, Any]):
        try:
            for key, value in data.items():
                if hasattr(profile, key):
                    setattr(profile, key, value)
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(profile)
            logger.info(f"{type(profile).__name__} {profile.id} updated")
            return profile
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error updating {type(profile).__name__} {profile.id}: {e}")
            raise BusinessLogicError(ErrorMessages.DATABASE_ERROR)

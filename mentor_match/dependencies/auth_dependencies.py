# mentor_match/dependencies/auth_dependencies.py
from typing import TypeVar, Type, Callable
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session
from ..models import User, MentorProfile, MenteeProfile
from ..database import get_db
from ..security import get_current_active_user
from ..constants import ErrorMessages

T = TypeVar('T')

def create_profile_dependency(model_class: Type[T], error_message: str) -> Callable:
    """
    Factory for dependencies that resolve the current user's own capability
    record (mentor or mentee profile), failing with 404 when it is absent.
    """
    def dependency(
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_active_user)
    ) -> T:
        profile = db.query(model_class).filter(model_class.user_id == current_user.id).first()
        if not profile:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_message)
        return profile

    return dependency

get_own_mentor_profile = create_profile_dependency(MentorProfile, ErrorMessages.MENTOR_PROFILE_NOT_FOUND)
get_own_mentee_profile = create_profile_dependency(MenteeProfile, ErrorMessages.MENTEE_PROFILE_NOT_FOUND)

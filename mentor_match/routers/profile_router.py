# mentor_match/routers/profile_router.py
from fastapi import APIRouter, Depends, HTTPException

from ..services import ProfileService
from ..dependencies.auth_dependencies import get_own_mentor_profile, get_own_mentee_profile
from ..dependencies.service_dependencies import get_profile_service
from ..schemas import (
    MentorProfileCreate, MentorProfileUpdate, MentorProfileResponse,
    MenteeProfileCreate, MenteeProfileUpdate, MenteeProfileResponse,
    UserProfilesResponse, UserSummary,
)
from ..models import User, MentorProfile, MenteeProfile
from ..security import get_current_active_user
from ..exceptions import BusinessLogicError

router = APIRouter(prefix="/api/profiles", tags=["profiles"])

@router.get("/me", response_model=UserProfilesResponse)
def get_my_profiles(
    current_user: User = Depends(get_current_active_user),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Current user with whichever mentor/mentee profiles they hold"""
    mentor, mentee = profile_service.get_profiles(current_user.id)
    return UserProfilesResponse(
        user=UserSummary.model_validate(current_user),
        mentor_profile=MentorProfileResponse.model_validate(mentor) if mentor else None,
        mentee_profile=MenteeProfileResponse.model_validate(mentee) if mentee else None,
    )

@router.post("/mentor", response_model=MentorProfileResponse, status_code=201)
def create_mentor_profile(
    mentor_data: MentorProfileCreate,
    current_user: User = Depends(get_current_active_user),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Create your mentor profile"""
    try:
        return profile_service.create_mentor_profile(current_user.id, mentor_data.model_dump())
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.put("/mentor", response_model=MentorProfileResponse)
def update_mentor_profile(
    mentor_data: MentorProfileUpdate,
    own_mentor: MentorProfile = Depends(get_own_mentor_profile),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Update your mentor profile"""
    try:
        return profile_service.update_mentor_profile(own_mentor, mentor_data.model_dump(exclude_unset=True))
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/mentee", response_model=MenteeProfileResponse, status_code=201)
def create_mentee_profile(
    mentee_data: MenteeProfileCreate,
    current_user: User = Depends(get_current_active_user),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Create your mentee profile"""
    try:
        return profile_service.create_mentee_profile(current_user.id, mentee_data.model_dump())
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.put("/mentee", response_model=MenteeProfileResponse)
def update_mentee_profile(
    mentee_data: MenteeProfileUpdate,
    own_mentee: MenteeProfile = Depends(get_own_mentee_profile),
    profile_service: ProfileService = Depends(get_profile_service)
):
    """Update your mentee profile"""
    try:
        return profile_service.update_mentee_profile(own_mentee, mentee_data.model_dump(exclude_unset=True))
    except BusinessLogicError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

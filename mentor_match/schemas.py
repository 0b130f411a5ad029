from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from .models import MatchStatus, MessageType
from .constants import BusinessRules

# --- Identity ---

class UserSummary(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = {"from_attributes": True}

# --- Profile Input Models ---

class MentorProfileCreate(BaseModel):
    years_of_experience: int = Field(0, ge=0, description="Years of professional experience.")
    areas_of_strength: List[str] = Field(default_factory=list, description="Ordered list of strength tags.")
    areas_of_expertise: List[str] = Field(default_factory=list, description="More detailed expertise breakdown.")
    mentoring_experience: Optional[str] = Field(None, description="Previous mentoring experience (e.g. 'first time', 'some', 'experienced').")
    bio: Optional[str] = Field(None, description="Professional biography.")
    industry: Optional[str] = None
    current_role: Optional[str] = None
    company: Optional[str] = None
    availability: Optional[str] = Field(None, description="e.g. 'weekly', 'bi-weekly', 'monthly', 'flexible'.")
    language_preferences: List[str] = Field(default_factory=list)
    max_mentees: Optional[int] = Field(None, ge=1, le=BusinessRules.MAX_MENTEES_LIMIT, description="Maximum simultaneous mentees. Defaults to the platform setting.")
    is_active: bool = True

class MentorProfileUpdate(BaseModel):
    years_of_experience: Optional[int] = Field(None, ge=0)
    areas_of_strength: Optional[List[str]] = None
    areas_of_expertise: Optional[List[str]] = None
    mentoring_experience: Optional[str] = None
    bio: Optional[str] = None
    industry: Optional[str] = None
    current_role: Optional[str] = None
    company: Optional[str] = None
    availability: Optional[str] = None
    language_preferences: Optional[List[str]] = None
    max_mentees: Optional[int] = Field(None, ge=1, le=BusinessRules.MAX_MENTEES_LIMIT)
    is_active: Optional[bool] = None

class MenteeProfileCreate(BaseModel):
    career_stage: Optional[str] = Field(None, description="e.g. 'student', 'early-career', 'mid-career', 'career-change'.")
    learning_goals: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    time_availability: Optional[str] = None
    level: Optional[str] = Field(None, description="e.g. 'beginner', 'intermediate', 'advanced'.")
    bio: Optional[str] = None
    is_active: bool = True

class MenteeProfileUpdate(BaseModel):
    career_stage: Optional[str] = None
    learning_goals: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    time_availability: Optional[str] = None
    level: Optional[str] = None
    bio: Optional[str] = None
    is_active: Optional[bool] = None

# --- Profile Output Models ---

class MentorProfileResponse(BaseModel):
    id: int
    user_id: int
    years_of_experience: int
    areas_of_strength: List[str]
    areas_of_expertise: List[str]
    mentoring_experience: Optional[str]
    bio: Optional[str]
    industry: Optional[str]
    current_role: Optional[str]
    company: Optional[str]
    availability: Optional[str]
    language_preferences: List[str]
    max_mentees: int
    current_mentee_count: int
    is_active: bool
    rating: Optional[float]
    total_reviews: int

    model_config = {"from_attributes": True}

class MenteeProfileResponse(BaseModel):
    id: int
    user_id: int
    career_stage: Optional[str]
    learning_goals: List[str]
    skills: List[str]
    interests: List[str]
    time_availability: Optional[str]
    level: Optional[str]
    bio: Optional[str]
    is_active: bool

    model_config = {"from_attributes": True}

class UserProfilesResponse(BaseModel):
    user: UserSummary
    mentor_profile: Optional[MentorProfileResponse] = None
    mentee_profile: Optional[MenteeProfileResponse] = None

class AvailableMentorResponse(MentorProfileResponse):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    match_score: int = Field(..., ge=0, le=100, description="Advisory compatibility score, recomputed on every listing.")

# --- Mentorship Lifecycle ---

class MentorshipRequestCreate(BaseModel):
    mentor_id: int = Field(..., description="User ID of the mentor being requested.")
    message: str

class MentorshipResponseCreate(BaseModel):
    match_id: int
    status: str = Field(..., description="'accepted' or 'declined'.")
    message: Optional[str] = None

class MatchMentorSummary(BaseModel):
    id: int
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    areas_of_strength: List[str] = []
    years_of_experience: int = 0

class MatchMenteeSummary(BaseModel):
    id: int
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    learning_goals: List[str] = []
    career_stage: Optional[str] = None

class MentorMatchResponse(BaseModel):
    id: int
    status: MatchStatus
    match_score: int
    request_message: str
    response_message: Optional[str]
    created_at: Optional[datetime]
    matched_at: Optional[datetime]
    completed_at: Optional[datetime]
    mentor: MatchMentorSummary
    mentee: MatchMenteeSummary

# --- Chat ---

class ChatMessageCreate(BaseModel):
    message: str
    message_type: str = Field(MessageType.TEXT.value, description="One of 'text', 'code', 'file'.")

class ChatMessageResponse(BaseModel):
    id: int
    match_id: int
    sender_id: int
    receiver_id: int
    sender_name: Optional[str] = None
    message: str
    message_type: MessageType
    is_read: bool
    read_at: Optional[datetime]
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}

class UnreadCountResponse(BaseModel):
    match_id: int
    unread: int

# mentor_match/dependencies/service_dependencies.py
from fastapi import Depends
from sqlalchemy.orm import Session
from ..database import get_db
from ..services.mentorship_service import MentorshipService
from ..services.profile_service import ProfileService
from ..services.chat_service import ChatService

def get_mentorship_service(db: Session = Depends(get_db)) -> MentorshipService:
    return MentorshipService(db)

def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)

def get_chat_service(db: Session = Depends(get_db)) -> ChatService:
    return ChatService(db)

# mentor_match/services/__init__.py
from .profile_service import ProfileService
from .mentorship_service import MentorshipService
from .chat_service import ChatService

__all__ = ["ProfileService", "MentorshipService", "ChatService"]

from . import profile_router
from . import mentorship_router
from . import chat_router

__all__ = [
    "profile_router",
    "mentorship_router",
    "chat_router",
]

# mentor_match/services/chat_service.py
import logging
from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError

from ..models import ChatMessage, MentorMatch, MatchStatus, MessageType, ENGAGED_STATUSES
from ..constants import ErrorMessages, BusinessRules
from ..exceptions import BusinessLogicError, UnauthorizedChatAccessError
from ..utils.validation_utils import ValidationUtils
from .profile_service import ProfileService
from .mentorship_service import MentorshipService

logger = logging.getLogger(__name__)

class ChatService:
    """Per-match conversation between the two parties of an accepted or active match."""

    def __init__(self, db: Session, mentorship: Optional[MentorshipService] = None):
        self.db = db
        self.mentorship = mentorship or MentorshipService(db)
        self.profiles: ProfileService = self.mentorship.profiles
        self.validator = ValidationUtils(db)

    def _get_chat_match(self, user_id: int, match_id: int) -> MentorMatch:
        mentor, mentee = self.profiles.get_profiles(user_id)
        match = self.validator.find_match_for_party(
            match_id, mentor=mentor, mentee=mentee, statuses=ENGAGED_STATUSES
        )
        if not match:
            raise UnauthorizedChatAccessError(ErrorMessages.UNAUTHORIZED_CHAT)
        return match

    def list_messages(self, user_id: int, match_id: int) -> List[ChatMessage]:
        """
        Returns the match's messages oldest first, then marks the ones addressed
        to the caller as read. The returned objects reflect the post-mark state.
        """
        match = self._get_chat_match(user_id, match_id)

        messages = self.db.query(ChatMessage).options(
            joinedload(ChatMessage.sender)
        ).filter(ChatMessage.match_id == match.id).order_by(
            ChatMessage.created_at.asc(), ChatMessage.id.asc()
        ).all()

        try:
            result = self.db.execute(
                update(ChatMessage)
                .where(
                    ChatMessage.match_id == match.id,
                    ChatMessage.receiver_id == user_id,
                    ChatMessage.is_read == False,
                )
                .values(is_read=True, read_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error marking messages read in match {match.id}: {e}")
            raise BusinessLogicError(ErrorMessages.DATABASE_ERROR)

        if result.rowcount:
            logger.debug(f"Marked {result.rowcount} messages read for user {user_id} in match {match.id}")
        return messages

    def send_message(self, sender_id: int, match_id: int, body: str, message_type: Optional[str] = MessageType.TEXT.value) -> ChatMessage:
        """Posts a message to the other party; the first message makes an accepted match active"""
        match = self._get_chat_match(sender_id, match_id)

        body = self.validator.require_text(body, ErrorMessages.EMPTY_CHAT_MESSAGE, BusinessRules.MAX_MESSAGE_LENGTH)
        kind = self.validator.validate_message_type(message_type)

        chat_message = ChatMessage(
            match_id=match.id,
            sender_id=sender_id,
            receiver_id=match.other_party_user_id(sender_id),
            message=body,
            message_type=kind.value,
            is_read=False,
        )
        try:
            self.db.add(chat_message)
            if match.status == MatchStatus.ACCEPTED.value and self.mentorship.mark_active(match):
                logger.info(f"Match {match.id} is now active")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error sending message in match {match.id}: {e}")
            raise BusinessLogicError(ErrorMessages.DATABASE_ERROR)

        self.db.refresh(chat_message)
        return chat_message

    def unread_count(self, user_id: int, match_id: int) -> int:
        match = self._get_chat_match(user_id, match_id)
        return self.db.query(ChatMessage).filter(
            ChatMessage.match_id == match.id,
            ChatMessage.receiver_id == user_id,
            ChatMessage.is_read == False,
        ).count()

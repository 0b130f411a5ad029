# mentor_match/models.py
from enum import Enum
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Boolean, ForeignKey, Numeric, Sequence, Index, text
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB, "postgresql")


class MatchStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    ACTIVE = "active"     # Accepted and the conversation has started
    COMPLETED = "completed"


class MessageType(str, Enum):
    TEXT = "text"
    CODE = "code"
    FILE = "file"


# Statuses that block a new request for the same pair
OPEN_STATUSES = (MatchStatus.PENDING, MatchStatus.ACCEPTED, MatchStatus.ACTIVE)
# Statuses that hold a mentor slot and allow chat
ENGAGED_STATUSES = (MatchStatus.ACCEPTED, MatchStatus.ACTIVE)
TERMINAL_STATUSES = (MatchStatus.DECLINED, MatchStatus.COMPLETED)

_OPEN_STATUS_SQL = "status IN ('pending', 'accepted', 'active')"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, Sequence('user_id_seq'), primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    mentor_profile = relationship("MentorProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    mentee_profile = relationship("MenteeProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class MentorProfile(Base):
    __tablename__ = "mentors"

    id = Column(Integer, Sequence('mentor_id_seq'), primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    years_of_experience = Column(Integer, nullable=False, default=0)
    areas_of_strength = Column(JSONType, nullable=False, default=list)
    areas_of_expertise = Column(JSONType, nullable=False, default=list)
    mentoring_experience = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    industry = Column(String, nullable=True)
    current_role = Column(String, nullable=True)
    company = Column(String, nullable=True)
    availability = Column(String, nullable=True) # e.g. 'weekly', 'monthly', 'flexible'
    language_preferences = Column(JSONType, nullable=False, default=list)

    max_mentees = Column(Integer, nullable=False, default=3)
    current_mentee_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True) # Accepting new mentees

    rating = Column(Numeric(3, 2), nullable=True)
    total_reviews = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    user = relationship("User", back_populates="mentor_profile")
    matches = relationship("MentorMatch", back_populates="mentor", cascade="all, delete-orphan")

    @property
    def has_capacity(self) -> bool:
        return self.current_mentee_count < self.max_mentees

    def __repr__(self):
        return f"<MentorProfile(id={self.id}, user_id={self.user_id}, mentees={self.current_mentee_count}/{self.max_mentees})>"


class MenteeProfile(Base):
    __tablename__ = "mentees"

    id = Column(Integer, Sequence('mentee_id_seq'), primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    career_stage = Column(String, nullable=True) # e.g. 'student', 'early-career', 'career-change'
    learning_goals = Column(JSONType, nullable=False, default=list)
    skills = Column(JSONType, nullable=False, default=list)
    interests = Column(JSONType, nullable=False, default=list)
    time_availability = Column(String, nullable=True)
    level = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True) # Actively seeking mentorship
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    user = relationship("User", back_populates="mentee_profile")
    matches = relationship("MentorMatch", back_populates="mentee", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<MenteeProfile(id={self.id}, user_id={self.user_id})>"


class MentorMatch(Base):
    __tablename__ = "mentor_matches"
    __table_args__ = (
        # At most one open match per pair, also under concurrent inserts
        Index(
            "uq_mentor_matches_open_pair", "mentor_id", "mentee_id",
            unique=True,
            postgresql_where=text(_OPEN_STATUS_SQL),
            sqlite_where=text(_OPEN_STATUS_SQL),
        ),
    )

    id = Column(Integer, Sequence('mentor_match_id_seq'), primary_key=True, index=True)

    mentor_id = Column(Integer, ForeignKey("mentors.id", ondelete="CASCADE"), nullable=False, index=True)
    mentee_id = Column(Integer, ForeignKey("mentees.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(String, default=MatchStatus.PENDING.value, nullable=False)
    match_score = Column(Integer, nullable=False)

    request_message = Column(Text, nullable=False)
    response_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    matched_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    mentor = relationship("MentorProfile", back_populates="matches")
    mentee = relationship("MenteeProfile", back_populates="matches")
    messages = relationship(
        "ChatMessage",
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="ChatMessage.id",
    )

    @property
    def party_user_ids(self) -> tuple:
        return (self.mentor.user_id, self.mentee.user_id)

    def other_party_user_id(self, user_id: int) -> int:
        """Returns the user id of the participant that is not `user_id`."""
        mentor_user_id, mentee_user_id = self.party_user_ids
        if user_id == mentor_user_id:
            return mentee_user_id
        if user_id == mentee_user_id:
            return mentor_user_id
        raise ValueError(f"User {user_id} is not a party to match {self.id}")

    def __repr__(self):
        return f"<MentorMatch(id={self.id}, mentor_id={self.mentor_id}, mentee_id={self.mentee_id}, status='{self.status}')>"


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, Sequence('chat_message_id_seq'), primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("mentor_matches.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    message_type = Column(String, nullable=False, default=MessageType.TEXT.value)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    match = relationship("MentorMatch", back_populates="messages")
    sender = relationship("User", foreign_keys=[sender_id], viewonly=True)
    receiver = relationship("User", foreign_keys=[receiver_id], viewonly=True)

    def __repr__(self):
        return f"<ChatMessage(id={self.id}, match_id={self.match_id}, sender_id={self.sender_id}, type='{self.message_type}')>"

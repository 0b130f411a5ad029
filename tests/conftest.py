import os

# Must be set before the package builds its engine and settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from mentor_match.database import Base, engine, SessionLocal, get_db
from mentor_match.main import app
from mentor_match.models import User, MentorProfile, MenteeProfile
from mentor_match.security import create_user_token
from mentor_match.services import MentorshipService, ChatService


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(first_name="Test", last_name=None, is_active=True):
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            first_name=first_name,
            last_name=last_name or f"User{counter['n']}",
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_mentor(db, make_user):
    def _make_mentor(max_mentees=3, current_mentee_count=0, is_active=True, **fields):
        user = make_user(first_name="Mentor")
        profile = MentorProfile(
            user_id=user.id,
            max_mentees=max_mentees,
            current_mentee_count=current_mentee_count,
            is_active=is_active,
            years_of_experience=fields.pop("years_of_experience", 4),
            areas_of_strength=fields.pop("areas_of_strength", ["python", "career growth"]),
            mentoring_experience=fields.pop("mentoring_experience", "some mentoring"),
            bio=fields.pop("bio", "Backend engineer who enjoys helping people grow into senior roles."),
            **fields,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return user, profile

    return _make_mentor


@pytest.fixture
def make_mentee(db, make_user):
    def _make_mentee(**fields):
        user = make_user(first_name="Mentee")
        profile = MenteeProfile(
            user_id=user.id,
            career_stage=fields.pop("career_stage", "early-career"),
            learning_goals=fields.pop("learning_goals", ["system design"]),
            skills=fields.pop("skills", ["python"]),
            **fields,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return user, profile

    return _make_mentee


@pytest.fixture
def mentorship(db):
    return MentorshipService(db)


@pytest.fixture
def chat(db, mentorship):
    return ChatService(db, mentorship)


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_user_token(user.id)}"}

    return _auth_headers


@pytest.fixture
def accepted_match(make_mentor, make_mentee, mentorship):
    mentor_user, mentor = make_mentor()
    mentee_user, mentee = make_mentee()
    match = mentorship.request_mentorship(mentee_user.id, mentor_user.id, "Please mentor me")
    match = mentorship.respond_to_request(mentor_user.id, match.id, "accepted", "Happy to help")
    return mentor_user, mentee_user, match

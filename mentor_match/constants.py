# mentor_match/constants.py
class ErrorMessages:
    MENTEE_PROFILE_NOT_FOUND = "Mentee profile not found. Please complete your profile first."
    MENTOR_PROFILE_NOT_FOUND = "Mentor profile not found"
    MENTOR_NOT_FOUND = "Mentor not found"
    MENTOR_AT_CAPACITY = "Mentor has reached maximum mentee capacity"
    DUPLICATE_REQUEST = "A mentorship request already exists between you and this mentor"
    MATCH_NOT_FOUND = "Match not found or unauthorized"
    INVALID_TRANSITION = "Invalid status transition"
    UNAUTHORIZED_CHAT ="Unauthorized access to chat or match not accepted"
    DUPLICATE_MENTOR_PROFILE = "You already have a mentor profile"
    DUPLICATE_MENTEE_PROFILE = "You already have a mentee profile"
    EMPTY_REQUEST_MESSAGE = "A request message is required"
    EMPTY_CHAT_MESSAGE = "Message cannot be empty"
    MESSAGE_TOO_LONG = "Message is too long"
    SELF_REQUEST = "You cannot request mentorship from yourself"
    INVALID_DECISION = "Decision must be 'accepted' or 'declined'"
    INVALID_MESSAGE_TYPE = "Message type must be one of: text, code, file"
    MAX_MENTEES_BELOW_CURRENT = "Max mentees cannot be lower than your current mentee count"
    DATABASE_ERROR = "Database error occurred"

class BusinessRules:
    MAX_MESSAGE_LENGTH = 5000
    MAX_REQUEST_MESSAGE_LENGTH = 2000
    MAX_MENTEES_LIMIT = 20

class ScoreWeights:
    BASE = 50
    # (minimum years, bonus), checked highest first
    EXPERIENCE_TIERS = ((5, 20), (3, 15), (1, 10))
    # (substring, bonus), first hit wins
    MENTORING_EXPERIENCE = (("experienced", 15), ("some", 10), ("first", 5))
    PER_STRENGTH = 2
    MAX_STRENGTH_BONUS = 10
    BIO_MIN_LENGTH = 50
    BIO_BONUS = 5
    HAS_CAPACITY_BONUS = 10
    AT_CAPACITY_PENALTY = -20
    MIN_SCORE = 0
    MAX_SCORE = 100

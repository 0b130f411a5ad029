# mentor_match/exceptions.py
class BusinessLogicError(Exception):
    """Base exception for business logic errors"""
    status_code = 400

class ProfileNotFoundError(BusinessLogicError):
    """Raised when the caller lacks the mentor or mentee profile an action needs"""
    status_code = 404

class ProfileAlreadyExistsError(BusinessLogicError):
    """Raised when trying to create duplicate profile"""
    status_code = 409

class MentorNotFoundError(BusinessLogicError):
    """Raised when the referenced mentor does not exist or is inactive"""
    status_code = 404

class MentorAtCapacityError(BusinessLogicError):
    """Raised when a mentor has no free mentee slots"""
    status_code = 409

class DuplicateRequestError(BusinessLogicError):
    """Raised when an open match already exists for the pair"""
    status_code = 409

class MatchNotFoundOrUnauthorizedError(BusinessLogicError):
    """Raised when a match is missing or the caller is not a party to it"""
    status_code = 404

class InvalidStatusTransitionError(BusinessLogicError):
    """Raised when invalid status transition is attempted"""
    status_code = 409

class UnauthorizedChatAccessError(BusinessLogicError):
    """Raised when a non-party or a non-engaged match is used for chat"""
    status_code = 403

class InvalidInputError(BusinessLogicError):
    """Raised on malformed input (empty message, unknown decision or message type)"""
    status_code = 400

from typing import Optional, Dict, Any

HIGH_DEMAND_MESSAGE = "Our AI is currently experiencing high demand. Please try again in a few moments."
GENERIC_AI_ERROR_MESSAGE = "An error occurred while communicating with the AI. Please try again."


class InterviewAppError(Exception):
    """Base exception for interview application errors."""

    def __init__(self, message: str, status_code: int = 500, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

class ValidationError(InterviewAppError):
    """Raised when input validation fails."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, status_code=400, payload={'field': field} if field else None)

class SessionError(InterviewAppError):
    """Raised when session operations fail."""
    def __init__(self, message: str, session_id: Optional[str] = None):
        super().__init__(message, status_code=404, payload={'session_id': session_id} if session_id else None)

class SessionBusyError(InterviewAppError):
    """Raised when a session already has a request in flight."""
    def __init__(self, session_id: str):
        super().__init__("A request for this session is already in progress", status_code=409,
                         payload={'session_id': session_id})

class StateTransitionError(InterviewAppError):
    """Raised when a session phase change is not allowed."""
    def __init__(self, message: str, phase: Optional[str] = None):
        super().__init__(message, status_code=409, payload={'phase': phase} if phase else None)

class AIServiceError(InterviewAppError):
    """Raised when a call to the hosted AI service fails."""
    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message, status_code=502, payload={'operation': operation} if operation else None)

class AIResponseError(AIServiceError):
    """Raised when the AI service answers with nothing usable."""

class AudioFormatError(InterviewAppError):
    """Raised when audio payloads cannot be decoded or wrapped."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)


def is_quota_error(error: BaseException) -> bool:
    """Quota and rate-limit failures surface as '429' or 'quota' in the message."""
    text = str(error)
    return '429' in text or 'quota' in text.lower()


def get_ai_error_message(error: BaseException) -> str:
    """Map any AI-layer failure to one of the two user-facing notices."""
    if is_quota_error(error):
        return HIGH_DEMAND_MESSAGE
    return GENERIC_AI_ERROR_MESSAGE

class BaseAppError(Exception):
    """Base class for application exceptions."""
    pass


class ProfileValidationError(BaseAppError):
    """Raised when a questionnaire field cannot be coerced into its typed value."""
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class ExternalServiceError(BaseAppError):
    """Raised when the narrative-insight service fails, times out or answers malformed data."""
    def __init__(self, message, original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception


class RecordNotFoundError(BaseAppError):
    """Raised when a questionnaire, analysis or session does not exist."""
    pass


class SessionStateError(BaseAppError):
    """Raised when a questionnaire session cannot accept the requested transition."""
    pass


class SessionExpiredError(SessionStateError):
    """Raised when a questionnaire session is older than its TTL."""
    pass

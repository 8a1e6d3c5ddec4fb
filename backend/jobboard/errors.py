"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; jobboard.main turns them into
``{"detail": message}`` responses so routers never build HTTPExceptions for
business-rule failures.
"""


class JobBoardError(Exception):
    """Base class for expected, user-visible failures."""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(JobBoardError):
    """Missing or malformed input."""
    status_code = 400
    default_message = "Missing required fields"


class AuthenticationError(JobBoardError):
    """Bad credentials or an invalid/expired session token."""
    status_code = 401
    default_message = "Invalid credentials"


class AuthorizationError(JobBoardError):
    """Authenticated, but the role or ownership does not allow the action."""
    status_code = 403
    default_message = "Unauthorized"


class NotFoundError(JobBoardError):
    status_code = 404
    default_message = "Not found"


class ConflictError(JobBoardError):
    """A uniqueness rule was violated (email, company per owner...)."""
    status_code = 409
    default_message = "Resource already exists"


class AlreadyAppliedError(ConflictError):
    """Duplicate (job, applicant) application. Kept at 400 for existing clients."""
    status_code = 400
    default_message = "You have already applied to this job"


class InvalidTransitionError(ConflictError):
    """Raised when an application status change is not in the transition table"""
    default_message = "Invalid status transition"


class InternalError(JobBoardError):
    """Unhandled datastore failure. The message is generic on purpose."""
    status_code = 500
    default_message = "Internal server error"

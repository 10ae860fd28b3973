"""Domain exceptions for the onboarding service.

Each carries an HTTP status and a stable error code so the wizard core can
raise them without depending on the web framework;
`middleware.exceptions` renders them into the API error envelope.
"""

from http import HTTPStatus


class OnboardingException(Exception):
    """Base exception for onboarding service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = int(status_code)
        self.error_code = error_code
        super().__init__(self.message)


class WizardSessionNotFoundError(OnboardingException):
    """No open wizard session under the given id (never opened, or expired)."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Wizard session not found: {session_id}",
            status_code=HTTPStatus.NOT_FOUND,
            error_code="WIZARD_SESSION_NOT_FOUND",
        )


class WizardBusyError(OnboardingException):
    """Raised for navigation or edits while a submission is in flight."""

    def __init__(self, message: str = "Submission in progress"):
        super().__init__(
            message=message,
            status_code=HTTPStatus.CONFLICT,
            error_code="WIZARD_BUSY",
        )


class WizardClosedError(OnboardingException):
    """Raised for any operation on a completed or abandoned wizard."""

    def __init__(self, wizard_status: str):
        super().__init__(
            message=f"Wizard is {wizard_status.lower()}",
            status_code=HTTPStatus.CONFLICT,
            error_code="WIZARD_CLOSED",
        )


class UnknownFieldError(OnboardingException):
    """Raised when editing a key the draft does not expose for editing."""

    def __init__(self, field: str):
        super().__init__(
            message=f"Unknown or read-only field: {field}",
            status_code=HTTPStatus(422),
            error_code="UNKNOWN_FIELD",
        )
        self.field = field


class RemoteOperationError(OnboardingException):
    """The remote GraphQL layer failed (transport, HTTP status or GraphQL errors)."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            status_code=HTTPStatus.BAD_GATEWAY,
            error_code="REMOTE_OPERATION_FAILED",
        )
        self.operation = operation


class PermissionDeniedError(OnboardingException):
    """Exception for permission denied."""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(
            message=message,
            status_code=HTTPStatus.FORBIDDEN,
            error_code="PERMISSION_DENIED",
        )



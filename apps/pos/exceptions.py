"""
Exceptions raised by the POS checkout.
"""


class BackendAPIError(Exception):
    """The retail backend rejected a request or returned ``success: false``."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationRequired(BackendAPIError):
    """The backend answered 401 for the configured API token."""


class BackendUnavailable(BackendAPIError):
    """The backend could not be reached after all retry attempts."""


class CheckoutSubmissionError(Exception):
    """Submitting a checkout to the backend failed. The session is left intact."""

    def __init__(self, message, session_id=None):
        super().__init__(message)
        self.message = message
        self.session_id = session_id

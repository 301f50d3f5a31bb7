"""Custom exceptions for Spinet frontend.

This module defines a hierarchy of exceptions for better error handling
and more informative error messages.

Exception Hierarchy:
    SpinetError (base)
    ├── InvalidParameterError
    ├── StaleResponseError
    ├── MissingScopeError
    └── APIError
        ├── RemoteFetchError
        ├── RemoteMutationError
        └── BackendUnavailableError
"""


class SpinetError(Exception):
    """Base exception for Spinet.

    All custom exceptions in this application should inherit from this class.
    This allows catching all application-specific errors with a single except clause.

    Example:
        >>> try:
        ...     risky_operation()
        ... except SpinetError as e:
        ...     handle_error(e)
    """

    def __init__(self, message: str = "An error occurred in Spinet"):
        self.message = message
        super().__init__(self.message)


class InvalidParameterError(SpinetError):
    """Raised when a table view is configured with invalid parameters.

    This is a programmer error (e.g. a page size of zero) and is raised
    synchronously instead of being turned into a notification.

    Attributes:
        parameter: Name of the offending parameter
        value: The rejected value

    Example:
        >>> raise InvalidParameterError("page_size", 0)
    """

    def __init__(self, parameter: str, value=None, message: str = None):
        self.parameter = parameter
        self.value = value
        self.message = message or f"Invalid value for {parameter}: {value!r}"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"InvalidParameterError(parameter={self.parameter!r}, value={self.value!r})"


class StaleResponseError(SpinetError):
    """Raised when a fetch result arrives after a newer fetch was started.

    Never shown to the user; the screen controller discards the result.

    Attributes:
        token: Token of the superseded request
        current_token: Token of the latest request
    """

    def __init__(self, token: int, current_token: int):
        self.token = token
        self.current_token = current_token
        super().__init__(
            f"Discarding response for request {token} (latest is {current_token})"
        )


class MissingScopeError(SpinetError):
    """Raised when an operation needs an active profile and none is selected."""

    def __init__(self, message: str = "Profile ID is missing"):
        super().__init__(message)


class APIError(SpinetError):
    """Raised when a backend API call fails.

    This is the base class for API-related errors.

    Attributes:
        endpoint: Endpoint that failed (e.g., '/profile/p1/contacts')
        status_code: HTTP status code (if applicable)

    Example:
        >>> raise APIError("API request failed", endpoint="/health", status_code=500)
    """

    def __init__(
        self,
        message: str = "API call failed",
        endpoint: str = None,
        status_code: int = None
    ):
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message)


class RemoteFetchError(APIError):
    """Raised when loading a record collection fails.

    Recovered by showing an empty table with a retry action.

    Example:
        >>> raise RemoteFetchError("Could not load contacts", endpoint="/profile/p1/contacts")
    """

    def __init__(
        self,
        message: str = "Failed to load records",
        endpoint: str = None,
        status_code: int = None
    ):
        super().__init__(message, endpoint=endpoint, status_code=status_code)


class RemoteMutationError(APIError):
    """Raised when a single create, update or delete call fails.

    Attributes:
        record_id: ID of the record the mutation targeted (optional)
    """

    def __init__(
        self,
        message: str = "Failed to update record",
        record_id: str = None,
        endpoint: str = None,
        status_code: int = None
    ):
        self.record_id = record_id
        super().__init__(message, endpoint=endpoint, status_code=status_code)


class BackendUnavailableError(APIError):
    """Raised when the backend API is unavailable.

    Example:
        >>> raise BackendUnavailableError("Cannot connect to backend API")
    """

    def __init__(self, message: str = "Backend API is unavailable"):
        super().__init__(message)

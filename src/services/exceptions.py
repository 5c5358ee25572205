"""
Shared exceptions for service layer operations.

Services raise these; the ServiceError handler in api.main turns them
into JSON error responses using each class's status_code.
"""


class ServiceError(Exception):
    """Base class for errors that surface directly to the client."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthError(ServiceError):
    """Raised when credentials or a bearer token are missing or invalid."""

    status_code = 401


class ConflictError(ServiceError):
    """Raised when a unique value (e.g. email) is already taken."""

    status_code = 409


class NotFoundError(ServiceError):
    """
    Raised when a resource does not exist or is not owned by the caller.

    Both cases produce the same message, so other users' IDs are not revealed.
    """

    status_code = 404

    def __init__(self, resource: str, resource_id: int) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when an email address already belongs to a user."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email is already registered")


class InvalidCredentialsError(AuthError):
    """Raised on signin with an unknown email or a wrong password."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")

"""Domain exceptions. The API layer maps each family to a status code."""


class InnerFlameError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(InnerFlameError):
    status_code = 400
    message = "Invalid data"


class UnknownRealmError(ValidationError):
    def __init__(self, realm_id: str):
        super().__init__(f"Unknown realm: {realm_id}")
        self.realm_id = realm_id


class ConflictError(InnerFlameError):
    # registration reports taken credentials as a 400
    status_code = 400
    message = "Email or username already taken"


class AuthenticationError(InnerFlameError):
    status_code = 401
    message = "Invalid credentials"


class NotFoundError(InnerFlameError):
    status_code = 404
    message = "Not found"


class AccountNotFoundError(NotFoundError):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class StorageUnavailableError(InnerFlameError):
    status_code = 500
    message = "Storage unavailable"

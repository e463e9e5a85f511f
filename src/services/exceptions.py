"""Shared exceptions for service layer operations."""


class InvalidRegistrationCodeError(Exception):
    """Raised when the registration verification code doesn't match the configured one."""

    def __init__(self) -> None:
        super().__init__("Invalid verification code")


class DuplicateUsernameError(Exception):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already exists")


class InvalidCredentialsError(Exception):
    """
    Raised on a failed login.

    Deliberately identical for unknown usernames and wrong passwords so callers
    can't probe which usernames exist.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidReorderError(Exception):
    """Raised in strict reorder mode when the id list isn't the owner's full, duplicate-free set."""

    def __init__(self, message: str) -> None:
        super().__init__(message)

"""Exceptions shared by the token modules."""


class UsernameRequiredError(Exception):
    """The token carries no username and the client supplied none."""

    def __init__(self, message="username required"):
        super().__init__(message)


class TagMismatchError(Exception):
    """The supplied entity tag does not match the stored state."""

    def __init__(self, message="tag mismatch"):
        super().__init__(message)


class TokenNotFoundError(FileNotFoundError):
    """The requested token does not exist."""

    def __init__(self, message="token not found"):
        super().__init__(message)
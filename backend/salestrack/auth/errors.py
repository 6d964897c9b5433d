from fastapi import status


class AuthError(Exception):
    """Base class for every rejection raised by the authentication core."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Could not validate credentials"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    message = "Incorrect username or password"


class Unauthenticated(AuthError):
    message = "Missing or malformed Authorization header"


class InvalidToken(AuthError):
    message = "Invalid or expired token"


class MalformedToken(InvalidToken):
    message = "Malformed token"


class UnsupportedAlgorithm(InvalidToken):
    message = "Unsupported token algorithm"


class BadSignature(InvalidToken):
    message = "Token signature mismatch"


class Expired(AuthError):
    message = "Token expired"


class NotFound(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class Forbidden(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not enough privileges"

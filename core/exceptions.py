from fastapi import HTTPException, status


class PescaException(HTTPException):
    error_type = "error"

    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST, headers: dict = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationFailed(PescaException):
    error_type = "validation_error"

    def __init__(self, detail: str = "Invalid request"):
        super().__init__(detail)


class NotFound(PescaException):
    error_type = "not_found"

    def __init__(self, detail: str = "Not found"):
        super().__init__(detail, status.HTTP_404_NOT_FOUND)


class Conflict(PescaException):
    """Business rule violation. Surfaced as 400 like the rest of the client errors."""
    error_type = "conflict"

    def __init__(self, detail: str):
        super().__init__(detail)


class Unauthorized(PescaException):
    error_type = "unauthorized"

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail, status.HTTP_401_UNAUTHORIZED, headers={"WWW-Authenticate": "Bearer"})


class TokenExpired(Unauthorized):
    error_type = "token_expired"

    def __init__(self):
        super().__init__("Token expired")


class Forbidden(PescaException):
    error_type = "forbidden"

    def __init__(self, detail: str = "Access denied"):
        super().__init__(detail, status.HTTP_403_FORBIDDEN)


class ServiceUnavailable(PescaException):
    error_type = "server_error"

    def __init__(self, detail: str = "Service temporarily unavailable, please retry"):
        super().__init__(detail, status.HTTP_503_SERVICE_UNAVAILABLE, headers={"Retry-After": "1"})


class TournamentNotFound(NotFound):
    def __init__(self, detail: str = "Tournament not found"):
        super().__init__(detail)


class TournamentFrozen(Conflict):
    def __init__(self, tournament_status: str):
        super().__init__(f"Tournament is {tournament_status}")


class AlreadyRegistered(Conflict):
    def __init__(self):
        super().__init__("You have already registered for this tournament")


class AreasUnavailable(Conflict):
    def __init__(self):
        super().__init__("Some selected areas are no longer available")


class AreasMissing(Conflict):
    def __init__(self):
        super().__init__("Some selected areas do not exist")


class InvalidStatusTransition(Conflict):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot change registration status from {current} to {target}")


class RegistrationClosed(Conflict):
    def __init__(self):
        super().__init__("Registration is only open while the tournament is active")

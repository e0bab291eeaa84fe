from enum import Enum


class UserRole(str, Enum):
    """Roles carried in the access token"""
    ORGANIZER = "organizer"  # Creates tournaments, manages layouts, approves registrations and catches
    USER = "user"            # Participant: registers, pays, uploads catches

    @classmethod
    def has_permission(cls, user_role: str, required_role: str) -> bool:
        """Roles are disjoint: an organizer cannot act as a participant and vice versa"""
        return cls(user_role) == cls(required_role)

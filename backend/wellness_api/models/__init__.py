from wellness_api.models.user import User, UserRole
from wellness_api.models.session import (
    Category, Difficulty, SessionStatus, SessionTag, WellnessSession, session_likes,
)

__all__ = [
    "User", "UserRole",
    "WellnessSession", "SessionTag", "SessionStatus", "Difficulty", "Category", "session_likes",
]

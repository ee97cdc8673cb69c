"""Model module imports for SQLAlchemy relationship registration."""

from postboard.db.models.api_key import ApiKey
from postboard.db.models.post import Post
from postboard.db.models.session import UserSession
from postboard.db.models.user import Base
from postboard.db.models.user import User

__all__ = [
    "ApiKey",
    "Base",
    "Post",
    "User",
    "UserSession",
]

# Import the Base class to make it accessible for models
# and for Alembic discovery via Base.metadata
from cyf_blog.db.base_class import Base  # noqa: F401

from .enums import UserRole
from .user import User
from .account import Account
from .session import Session
from .verification_token import VerificationToken

__all__ = [
    "Base",
    "UserRole",
    "User",
    "Account",
    "Session",
    "VerificationToken",
]

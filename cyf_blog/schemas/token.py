from pydantic import BaseModel
from typing import Optional

from .user import User

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenWithUser(Token):
    user: User

class TokenPayload(BaseModel):
    sub: Optional[str] = None  # user id
    sid: Optional[str] = None  # session token backing this JWT
    username: Optional[str] = None

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

# Schema for creating a VerificationToken
class VerificationTokenCreate(BaseModel):
    identifier: str
    token: str
    expires: datetime

class VerificationToken(VerificationTokenCreate):
    id: str
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class VerificationState(BaseModel):
    user_id: Optional[str] = None
    email_verified: Optional[datetime] = None
    verification_pending: bool = False

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class AccountCreate(BaseModel):
    type: str = Field(..., examples=["oauth"])
    provider: str = Field(..., examples=["google"])
    provider_account_id: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None
    id_token: Optional[str] = None

# Tokens stay server-side
class Account(BaseModel):
    id: str
    user_id: str
    type: str
    provider: str
    provider_account_id: str
    expires_at: Optional[int] = None
    scope: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

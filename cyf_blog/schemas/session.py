from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

class Session(BaseModel):
    id: str
    user_id: str
    expires: datetime
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None
    current: bool = False
    model_config = ConfigDict(from_attributes=True)

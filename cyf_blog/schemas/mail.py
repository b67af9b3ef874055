from typing import Any, Dict
from pydantic import BaseModel, EmailStr, Field

class MailOptions(BaseModel):
    to: EmailStr
    subject: str
    template: str
    context: Dict[str, Any] = Field(default_factory=dict)

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

# The web client checks `code == 0` and reads `data`, so every JSON response
# goes out in this envelope.
class ApiResponse(BaseModel, Generic[T]):
    code: int = 0
    message: str = "success"
    data: Optional[T] = None

class ErrorResponse(BaseModel):
    code: int
    message: str
    data: None = None
    path: str
    timestamp: datetime
    errors: Optional[List[Any]] = None

class StatusMessage(BaseModel):
    status: str
    message_id: Optional[str] = None

def ok(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(data=data, message=message)

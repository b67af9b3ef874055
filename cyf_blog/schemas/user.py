from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from datetime import datetime

from cyf_blog.models.enums import UserRole

USERNAME_MIN_LENGTH = 6
PASSWORD_MIN_LENGTH = 6

class UserBase(BaseModel):
    username: str = Field(..., min_length=USERNAME_MIN_LENGTH, max_length=64, examples=["chenyifaer"])
    nickname: Optional[str] = Field(None, max_length=64, examples=["Yifaer"])
    email: EmailStr = Field(..., examples=["user@example.com"])

class UserRegister(UserBase):
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)

class UserCreate(UserRegister):
    image: Optional[str] = None
    role: UserRole = UserRole.USER

class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=USERNAME_MIN_LENGTH, max_length=64)
    nickname: Optional[str] = Field(None, max_length=64)
    email: Optional[EmailStr] = None

class UserUpdateInternal(UserUpdate):
    image: Optional[str] = None
    email_verified: Optional[datetime] = None
    role: Optional[UserRole] = None
    model_config = ConfigDict(from_attributes=True)

class User(BaseModel):
    id: str
    username: str
    nickname: Optional[str] = None
    email: str
    email_verified: Optional[datetime] = None
    image: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class UserPage(BaseModel):
    items: List[User]
    total: int
    page: int
    page_size: int

class UserLogin(BaseModel):
    username: str = Field(..., description="Username or email")
    password: str

class UsernameCheck(BaseModel):
    username: Optional[str] = None

class EmailCheck(BaseModel):
    email: Optional[str] = None

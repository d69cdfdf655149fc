from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Theme(str, Enum):
    light = "light"
    dark = "dark"


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class UserRead(BaseModel):
    id: int
    username: str
    theme: str
    created_at: datetime


class ThemeUpdate(BaseModel):
    theme: Theme

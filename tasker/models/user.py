from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True, max_length=150)
    password_hash: str = Field(max_length=255)  # bcrypt 해시만 저장
    theme: str = Field(default="light", max_length=10)
    created_at: datetime = Field(default_factory=datetime.utcnow)

# app/db/models/users/user.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=100, unique=True, index=True)
    nickname: str = Field(max_length=20, unique=True, index=True)
    phone_number: str = Field(max_length=20, unique=True, index=True)
    password: str = Field(max_length=255)
    deleted_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

# app/schemas/users/user.py
from pydantic import BaseModel, Field, EmailStr, validator
from typing import Optional
from datetime import datetime
import re

PHONE_PATTERN = re.compile(r'^01[016789]-[0-9]{3,4}-[0-9]{4}$')


def validate_phone_number(v: str) -> str:
    v = v.strip()
    if not PHONE_PATTERN.match(v):
        raise ValueError('Invalid phone number format. Use 010-1234-5678')
    return v


def validate_password_strength(v: str) -> str:
    if not re.search(r'[A-Za-z]', v) or not re.search(r'[0-9]', v):
        raise ValueError('Password must contain letters and digits')
    return v


class ConfirmEmailRequest(BaseModel):
    email: EmailStr

class ConfirmNicknameRequest(BaseModel):
    nickname: str = Field(..., min_length=2, max_length=20)

    @validator('nickname')
    def validate_nickname(cls, v):
        if v != v.strip():
            raise ValueError('Nickname cannot start or end with whitespace')
        return v

class PhoneNumberRequest(BaseModel):
    phoneNumber: str = Field(..., description="Korean mobile number, e.g. 010-1234-5678")

    @validator('phoneNumber')
    def validate_phone(cls, v):
        return validate_phone_number(v)

class CreateUserRequest(BaseModel):
    email: EmailStr
    nickname: str = Field(..., min_length=2, max_length=20)
    phoneNumber: str
    password: str = Field(..., min_length=8, max_length=30)

    @validator('phoneNumber')
    def validate_phone(cls, v):
        return validate_phone_number(v)

    @validator('password')
    def validate_password(cls, v):
        return validate_password_strength(v)

class FindEmailRequest(BaseModel):
    phoneNumber: str

    @validator('phoneNumber')
    def validate_phone(cls, v):
        return validate_phone_number(v)

class PasswordResetRequest(BaseModel):
    email: EmailStr
    phoneNumber: str
    password: str = Field(..., min_length=8, max_length=30)

    @validator('phoneNumber')
    def validate_phone(cls, v):
        return validate_phone_number(v)

    @validator('password')
    def validate_password(cls, v):
        return validate_password_strength(v)

class CreateUserResponse(BaseModel):
    id: int

class FindEmailResponse(BaseModel):
    email: str

class UserResponse(BaseModel):
    id: int
    email: str
    nickname: str
    phoneNumber: str
    createdAt: datetime
    deletedAt: Optional[datetime] = None

# app/schemas/auth/auth.py
from pydantic import BaseModel, Field, EmailStr, validator
from typing import Optional
import re

from ..users.user import validate_phone_number
from ...application.services.user_service import VERIFICATION_KINDS

class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)

class ConfirmAuthNumberRequest(BaseModel):
    type: str = Field(..., description="Verification purpose: 'signup', 'email' or 'password'")
    phoneNumber: str
    authNumber: str = Field(..., description="6-digit code received by SMS")

    @validator('phoneNumber')
    def validate_phone(cls, v):
        return validate_phone_number(v)

    @validator('type')
    def validate_type(cls, v):
        if v not in VERIFICATION_KINDS:
            raise ValueError('Type must be one of "signup", "email", "password"')
        return v

    @validator('authNumber')
    def validate_auth_number(cls, v):
        if not re.fullmatch(r'[0-9]{6}', v):
            raise ValueError('Auth number must be 6 digits')
        return v

class TokenPairResponse(BaseModel):
    accessToken: str
    refreshToken: Optional[str] = None

class AccessTokenResponse(BaseModel):
    accessToken: str

"""
Pydantic schemas for sign-in and registration.
"""

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=200)


class SignUpRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=200)
    full_name: str = Field(min_length=1, max_length=200)


class SessionResponse(BaseModel):
    user_id: str
    role: str
    redirect_to: str

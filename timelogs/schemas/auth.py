from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(description="Username or email address")
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

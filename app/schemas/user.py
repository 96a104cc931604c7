from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    email: str = Field(min_length=5, max_length=255, pattern=EMAIL_PATTERN)
    name: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=255)


class UserLogin(BaseModel):
    email: str = Field(min_length=5, max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1, max_length=255)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str


class LoginResponse(BaseModel):
    session_id: str
    token: str
    token_type: str = "bearer"
    user: UserRead


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Successfully logged out"


class HealthResponse(BaseModel):
    status: str
    redis: str

from typing import Annotated
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from datetime import datetime

from wellness_api.models.user import UserRole

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
PasswordStr = Annotated[str, Field(min_length=6, max_length=128)]

class UserRegister(BaseModel):
    email: EmailStr = Field(max_length=255)
    password: PasswordStr
    # defaults to the local part of the email
    name: NameStr | None = None

class UserLogin(BaseModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=1, max_length=256)]

class UserUpdateDetails(BaseModel):
    name: NameStr | None = None
    email: EmailStr | None = None

class PasswordUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: Annotated[str, Field(min_length=1, max_length=256)] = Field(alias="currentPassword")
    new_password: PasswordStr = Field(alias="newPassword")

class UserPublic(BaseModel):
    """What other parts of the API are allowed to see about a user."""
    id: int
    email: str
    name: str
    role: UserRole
    model_config = {"from_attributes": True}

class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    model_config = {"from_attributes": True}

class UserRead(UserPublic):
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

class AuthPayload(BaseModel):
    token: str
    user: UserPublic

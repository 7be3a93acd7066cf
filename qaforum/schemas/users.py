from pydantic import BaseModel, field_validator
from typing import Optional

from ..models.users import ROLES

PASSWORD_MIN_LENGTH = 6
USERNAME_MAX_LENGTH = 50


def _required(value: str, field: str) -> str:
    if not value or not value.strip():
        raise ValueError(f'{field} must not be empty')
    return value


class RegisterIn(BaseModel):
    username: str
    password: str
    role: str

    @field_validator('username')
    @classmethod
    def username_not_empty(cls, v):
        _required(v, 'username')
        if len(v) > USERNAME_MAX_LENGTH:
            raise ValueError(f'username must be at most {USERNAME_MAX_LENGTH} characters')
        return v

    @field_validator('password')
    @classmethod
    def password_long_enough(cls, v):
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f'password must be at least {PASSWORD_MIN_LENGTH} characters')
        return v

    @field_validator('role')
    @classmethod
    def role_known(cls, v):
        if v not in ROLES:
            raise ValueError('role must be either user or admin')
        return v


class LoginIn(BaseModel):
    username: str
    password: str
    role: str

    @field_validator('username', 'password', 'role')
    @classmethod
    def not_empty(cls, v, info):
        return _required(v, info.field_name)


class UsernameChangeIn(BaseModel):
    new_username: str
    user_id: int

    @field_validator('new_username')
    @classmethod
    def username_not_empty(cls, v):
        _required(v, 'new_username')
        if len(v) > USERNAME_MAX_LENGTH:
            raise ValueError(f'new_username must be at most {USERNAME_MAX_LENGTH} characters')
        return v


class PasswordChangeIn(BaseModel):
    old_password: str
    new_password: str
    user_id: int

    @field_validator('old_password')
    @classmethod
    def old_not_empty(cls, v):
        return _required(v, 'old_password')

    @field_validator('new_password')
    @classmethod
    def new_long_enough(cls, v):
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f'new_password must be at least {PASSWORD_MIN_LENGTH} characters')
        return v


class UserOut(BaseModel):
    user_id: int
    username: str
    role: str
    created_at: str


class LoginOut(BaseModel):
    success: bool = True
    message: str
    user: UserOut


class RoleData(BaseModel):
    role: str


class RoleOut(BaseModel):
    success: bool = True
    data: RoleData


class ActionOkOut(BaseModel):
    success: bool = True
    message: Optional[str] = None

# tabulens/schemas/forms.py
"""
Login / registration forms.

Validation happens here, before any request is made; a rejected form raises
FormValidationError carrying one message list per field.
"""
from __future__ import annotations

from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, EmailStr, Field, ValidationError, model_validator

from ..core.errors import FormValidationError


class LoginForm(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    remember_me: bool = False


class RegisterForm(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


_MESSAGES = {
    ("name", "string_too_short"): "Full name must be at least 2 characters",
    ("confirm_password", "value_error"): "Passwords don't match",
    ("email", "value_error"): "Invalid email address",
}

F = TypeVar("F", bound=BaseModel)


def _message(form: Type[BaseModel], field: str, err: Dict[str, Any]) -> str:
    if field == "password" and err["type"] == "string_too_short":
        if form is RegisterForm:
            return "Password must be at least 8 characters"
        return "Password is required"
    msg = _MESSAGES.get((field, err["type"]))
    return msg or err["msg"]


def validate_form(form: Type[F], data: Dict[str, Any]) -> F:
    try:
        return form.model_validate(data)
    except ValidationError as e:
        field_errors: Dict[str, List[str]] = {}
        for err in e.errors():
            loc = err.get("loc") or ()
            field = str(loc[0]) if loc else "confirm_password"
            field_errors.setdefault(field, []).append(_message(form, field, err))
        raise FormValidationError(field_errors) from e

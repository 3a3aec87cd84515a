# lawbook/forms.py
"""Form schemas and the per-field error bookkeeping used to re-render forms."""
import re
from dataclasses import dataclass, field

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from lawbook.models.user import UserRole

EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

MIN_PASSWORD_CHARS = 8
MAX_PASSWORD_BYTES = 72  # bcrypt ignores/refuses anything longer


def _not_blank(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank", "This field cannot be blank")
    return value


def _email(value: str) -> str:
    value = _not_blank(value).strip()
    if not EMAIL_RX.match(value):
        raise PydanticCustomError("email", "This field must be a valid email address")
    return value


@dataclass
class FormState:
    values: dict = field(default_factory=dict)
    field_errors: dict = field(default_factory=dict)
    non_field_errors: list = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.field_errors and not self.non_field_errors

    def add_field_error(self, key: str, message: str) -> None:
        # first message per field wins
        self.field_errors.setdefault(key, message)

    def add_non_field_error(self, message: str) -> None:
        self.non_field_errors.append(message)


class SignupForm(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    role: str = ""

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _not_blank(value).strip()

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        _not_blank(value)
        if len(value) < MIN_PASSWORD_CHARS:
            raise PydanticCustomError(
                "min_chars", "This field must be at least {n} characters long", {"n": MIN_PASSWORD_CHARS}
            )
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise PydanticCustomError(
                "max_bytes", "This field must be at most {n} bytes long", {"n": MAX_PASSWORD_BYTES}
            )
        return value

    @field_validator("role")
    @classmethod
    def check_role(cls, value: str) -> str:
        if value not in {role.value for role in UserRole}:
            raise PydanticCustomError("role", "Please select a valid role")
        return value


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _not_blank(value)


def bind_form(schema: type[BaseModel], data: dict):
    """Validate ``data``; returns the parsed model (or None) and the form state."""
    state = FormState(values=dict(data))
    try:
        parsed = schema.model_validate(data)
    except ValidationError as exc:
        for error in exc.errors():
            key = str(error["loc"][0]) if error["loc"] else "__all__"
            state.add_field_error(key, error["msg"])
        return None, state
    state.values = parsed.model_dump()
    return parsed, state

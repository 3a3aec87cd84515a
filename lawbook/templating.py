# lawbook/templating.py
from datetime import datetime
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from lawbook.csrf import generate_csrf_token
from lawbook.errors import NoRecord
from lawbook.forms import FormState
from lawbook.models.user import UserRole
from lawbook.security import is_authenticated
from lawbook.sessions import pop_flash, session_user_id
from lawbook.stores import users

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def human_date(value: datetime | None) -> str:
    if not value:
        return ""
    return value.strftime("%d %b %Y at %H:%M")


ROLE_LABELS = {
    UserRole.STUDENT: "Student",
    UserRole.LAWYER: "Lawyer",
    UserRole.RECRUITER: "Recruiter",
}


def role_display(role) -> str:
    try:
        return ROLE_LABELS[UserRole(role)]
    except ValueError:
        return str(role)


templates.env.filters["human_date"] = human_date
templates.env.filters["role_display"] = role_display


def render(
    request: Request,
    db: Session,
    name: str,
    context: dict | None = None,
    status_code: int = 200,
):
    data = {
        "current_year": datetime.now().year,
        "flash": pop_flash(request),
        "is_authenticated": is_authenticated(request),
        "csrf_token": lambda: generate_csrf_token(request),
        "user": None,
        "form": FormState(),
    }
    if data["is_authenticated"]:
        try:
            data["user"] = users.get(db, session_user_id(request))
        except NoRecord:
            pass
    data.update(context or {})

    response = templates.TemplateResponse(request, name, data, status_code=status_code)
    if getattr(request.state, "no_store", False):
        response.headers["Cache-Control"] = "no-store"
    return response

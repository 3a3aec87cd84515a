# lawbook/routers/moot.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from lawbook.db import get_db
from lawbook.models.user import UserRole
from lawbook.security import require_any_role, require_authentication
from lawbook.templating import render

# Students and lawyers only
router = APIRouter(
    prefix="/moot",
    tags=["Moot Court"],
    dependencies=[
        Depends(require_authentication),
        Depends(require_any_role(UserRole.STUDENT, UserRole.LAWYER)),
    ],
)


@router.get("/setup", name="moot_setup")
def moot_setup(request: Request, db: Session = Depends(get_db)):
    return render(request, db, "moot_setup.html")


@router.get("/session", name="moot_session")
def moot_session(request: Request, db: Session = Depends(get_db)):
    return render(request, db, "moot_session.html")

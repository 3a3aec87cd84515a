# lawbook/routers/dashboards.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from lawbook.db import get_db
from lawbook.models.user import User, UserRole
from lawbook.security import require_authentication, require_role
from lawbook.stores import users
from lawbook.templating import render

router = APIRouter(tags=["Dashboards"], dependencies=[Depends(require_authentication)])

RECENT_STUDENTS_LIMIT = 20


@router.get("/student/dashboard", name="student_dashboard")
def student_dashboard(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.STUDENT)),
):
    return render(request, db, "student_dashboard.html")


@router.get("/lawyer/dashboard", name="lawyer_dashboard")
def lawyer_dashboard(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.LAWYER)),
):
    return render(request, db, "lawyer_dashboard.html")


@router.get("/recruiter/dashboard", name="recruiter_dashboard")
def recruiter_dashboard(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.RECRUITER)),
):
    students = users.list_by_role(db, UserRole.STUDENT, limit=RECENT_STUDENTS_LIMIT)
    return render(request, db, "recruiter_dashboard.html", {"students": students})

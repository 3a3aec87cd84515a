# lawbook/routers/pages.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from lawbook.db import get_db
from lawbook.templating import render

router = APIRouter(tags=["Pages"])


@router.get("/", name="home")
def home(request: Request, db: Session = Depends(get_db)):
    return render(request, db, "home.html")


@router.get("/about", name="about")
def about(request: Request, db: Session = Depends(get_db)):
    return render(request, db, "about.html")

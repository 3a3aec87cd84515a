# lawbook/routers/auth.py
import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from lawbook.db import get_db
from lawbook.errors import DuplicateEmail, InvalidCredentials, NoRecord
from lawbook.forms import LoginForm, SignupForm, bind_form
from lawbook.models.user import UserRole
from lawbook.schemas import CurrentUserResponse, UserResponse
from lawbook.security import LOGIN_URL, is_authenticated, require_authentication
from lawbook.sessions import SESSION_USER_KEY, put_flash, renew_token, session_user_id
from lawbook.stores import users
from lawbook.templating import render

router = APIRouter(tags=["Auth"])
log = logging.getLogger(__name__)

ROLE_HOME = {
    UserRole.STUDENT: "/student/dashboard",
    UserRole.LAWYER: "/lawyer/dashboard",
    UserRole.RECRUITER: "/recruiter/dashboard",
}


# -----------------------------
#   SIGNUP
# -----------------------------
@router.get("/user/signup", name="signup_ui")
def signup_ui(request: Request, db: Session = Depends(get_db)):
    return render(request, db, "signup.html")


@router.post("/user/signup")
def signup_submit(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    role: str = Form(""),
    db: Session = Depends(get_db),
):
    form, state = bind_form(
        SignupForm, {"name": name, "email": email, "password": password, "role": role}
    )
    if not state.valid:
        return render(request, db, "signup.html", {"form": state}, status_code=422)

    try:
        user_id = users.insert(db, form.name, form.email, form.password, UserRole(form.role))
    except DuplicateEmail:
        state.add_field_error("email", "Email address is already in use")
        return render(request, db, "signup.html", {"form": state}, status_code=422)

    log.info("New %s account %s registered", form.role, user_id)
    put_flash(request, "Your signup was successful. Please log in.")
    return RedirectResponse(url=LOGIN_URL, status_code=303)


# -----------------------------
#   LOGIN
# -----------------------------
@router.get("/user/login", name="login_ui")
def login_ui(request: Request, db: Session = Depends(get_db)):
    return render(request, db, "login.html")


@router.post("/user/login")
def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    form, state = bind_form(LoginForm, {"email": email, "password": password})
    if not state.valid:
        return render(request, db, "login.html", {"form": state}, status_code=422)

    try:
        user_id = users.authenticate(db, form.email, form.password)
    except InvalidCredentials:
        log.warning("Failed login attempt for %s", form.email)
        state.add_non_field_error("Email or password is incorrect")
        return render(request, db, "login.html", {"form": state}, status_code=422)

    # new token before storing the id, so a planted session id is useless
    renew_token(request)
    request.session[SESSION_USER_KEY] = user_id

    user = users.get(db, user_id)
    log.info("User %s logged in", user_id)
    return RedirectResponse(url=ROLE_HOME.get(user.role, "/"), status_code=303)


# -----------------------------
#   LOGOUT
# -----------------------------
@router.post("/user/logout", name="logout", dependencies=[Depends(require_authentication)])
def logout(request: Request):
    user_id = session_user_id(request)
    renew_token(request)
    request.session.pop(SESSION_USER_KEY, None)
    put_flash(request, "You've been logged out successfully!")
    log.info("User %s logged out", user_id)
    return RedirectResponse(url="/", status_code=303)


# -----------------------------
#   ACCOUNT
# -----------------------------
@router.get("/user/account", name="account_ui", dependencies=[Depends(require_authentication)])
def account_ui(request: Request, db: Session = Depends(get_db)):
    try:
        user = users.get(db, session_user_id(request))
    except NoRecord:
        return RedirectResponse(url=LOGIN_URL, status_code=303)
    return render(request, db, "account.html", {"user": user})


# -----------------------------
#   JSON: CURRENT USER
# -----------------------------
@router.get("/api/user/me", response_model=CurrentUserResponse, response_model_exclude_none=True)
def current_user(request: Request, db: Session = Depends(get_db)):
    if not is_authenticated(request):
        return CurrentUserResponse(authenticated=False)
    try:
        user = users.get(db, session_user_id(request))
    except NoRecord:
        return CurrentUserResponse(authenticated=False)
    return CurrentUserResponse(authenticated=True, user=UserResponse.model_validate(user))

# lawbook/main.py
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.responses import RedirectResponse

from lawbook import config
from lawbook.csrf import csrf_protect
from lawbook.db import init_db
from lawbook.middleware import log_request, recover_panic, secure_headers
from lawbook.security import RedirectRequired, authenticate
from lawbook.sessions import DatabaseSessionMiddleware

# Routers
from lawbook.routers.auth import router as auth_router
from lawbook.routers.dashboards import router as dashboards_router
from lawbook.routers.moot import router as moot_router
from lawbook.routers.pages import router as pages_router


BASE_DIR = Path(__file__).resolve().parent

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
log = logging.getLogger("lawbook")

config.validate_runtime_config()

app = FastAPI(
    title="Lawbook",
    version="0.1.0",
    # session load happens in middleware; these run before every route
    dependencies=[Depends(csrf_protect), Depends(authenticate)],
)

# ==================== STATIC ====================
static_dir = BASE_DIR / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
else:
    log.info("Static directory not found at %s", static_dir)

# ==================== MIDDLEWARES ====================
# Added innermost first: sessions -> panic recovery -> logging -> headers -> CORS

app.add_middleware(
    DatabaseSessionMiddleware,
    secret_key=config.SECRET_KEY,
    session_cookie=config.SESSION_COOKIE_NAME,
    max_age=config.SESSION_LIFETIME_HOURS * 60 * 60,
    path="/",
    same_site="lax",
    https_only=config.SESSION_COOKIE_SECURE,
)
app.middleware("http")(recover_panic)
app.middleware("http")(log_request)
app.middleware("http")(secure_headers)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.CORS_ALLOW_ORIGIN],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(RedirectRequired)
async def redirect_required_handler(request: Request, exc: RedirectRequired):
    return RedirectResponse(url=exc.url, status_code=303)


# ==================== ROUTERS ====================

app.include_router(pages_router)
app.include_router(auth_router)
app.include_router(dashboards_router)
app.include_router(moot_router)

# ==================== LIFECYCLE ====================

@app.on_event("startup")
async def on_startup():
    log.info("Creating database tables...")
    init_db()
    log.info("Lawbook ready (env=%s)", config.APP_ENV)


@app.on_event("shutdown")
async def on_shutdown():
    log.info("Shutting down Lawbook...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("lawbook.main:app", host=config.HOST, port=config.PORT)

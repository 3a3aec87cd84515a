# lawbook/middleware.py
import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse

log = logging.getLogger("lawbook.http")

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; style-src 'self' fonts.googleapis.com; font-src fonts.gstatic.com",
    "Referrer-Policy": "origin-when-cross-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "deny",
    "X-XSS-Protection": "0",
}


async def secure_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


async def log_request(request: Request, call_next):
    client = request.client.host if request.client else "-"
    target = request.url.path
    if request.url.query:
        target += "?" + request.url.query
    http_version = request.scope.get("http_version", "1.1")
    log.info("%s - HTTP/%s %s %s", client, http_version, request.method, target)
    return await call_next(request)


async def recover_panic(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return PlainTextResponse(
            "Internal Server Error",
            status_code=500,
            headers={"Connection": "close"},
        )

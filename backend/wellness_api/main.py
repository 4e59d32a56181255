# wellness_api/main.py
import time
import logging
import uuid
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from wellness_api.errors import WellnessError
from wellness_api.routers.auth import router as auth_router
from wellness_api.routers.sessions import router as sessions_router
from wellness_api.db import SessionLocal  # for healthz DB check
from wellness_api.settings import get_settings

log = logging.getLogger("uvicorn")
settings = get_settings()

app = FastAPI(
    title="Wellness Sessions API",
    openapi_tags=[
        {"name": "auth", "description": "Registration, login & account details"},
        {"name": "sessions", "description": "Wellness session drafts, publishing and likes"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})

@app.exception_handler(WellnessError)
async def wellness_error_handler(request: Request, exc: WellnessError):
    log.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    response = _error(exc.status_code, exc.message)
    if headers:
        response.headers.update(headers)
    return response

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    log.warning("validation error on %s: %s", request.url.path, exc.errors())
    fields = []
    for e in exc.errors():
        loc = [str(p) for p in e.get("loc", ()) if p not in ("body", "query", "path")]
        fields.append(f"{'.'.join(loc) or 'request'}: {e.get('msg')}")
    return _error(status.HTTP_400_BAD_REQUEST, "; ".join(fields) or "Invalid request data")

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.error("unhandled error on %s", request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


@app.get("/")
def root():
    return {"ok": True, "name": "Wellness Sessions API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/api/health")
def health():
    return {
        "success": True,
        "message": "Wellness Sessions API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(auth_router)
app.include_router(sessions_router)

# ---------------------------------------------------------
# backend/main.py
# Property Manager - Projects Backend
#
# Run: uvicorn backend.main:app --reload (from repo root)
#
# - FastAPI + JSON file storage (DATA_DIR/projects.json)
# - /api/projects : list / create / update / delete projects
# - /health       : liveness probe
# ---------------------------------------------------------

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import local modules (robust fallback for different run contexts)
try:
    from backend.config import ALLOWED_METHODS, CORS_ORIGINS, IS_DEV
    from backend.project_store import get_project_store
    from backend.routes_projects import PROJECTS_PATH, router as projects_router
except ModuleNotFoundError:
    from config import ALLOWED_METHODS, CORS_ORIGINS, IS_DEV
    from project_store import get_project_store
    from routes_projects import PROJECTS_PATH, router as projects_router


# Headers stamped on every response (including errors)
CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Methods": ", ".join([*ALLOWED_METHODS, "OPTIONS"]),
    "Access-Control-Allow-Headers": "Content-Type",
}
if "*" in CORS_ORIGINS:
    CORS_HEADERS["Access-Control-Allow-Origin"] = "*"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One-time store initialization at process start (creates data dir + empty file)
    get_project_store().init()
    print("[STARTUP] Project store ready")
    yield


# ---------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------
app = FastAPI(title="Property Manager Backend", version="0.1", lifespan=lifespan)


@app.middleware("http")
async def stamp_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# CORS configuration from config module (handles browser preflights)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=[*ALLOWED_METHODS, "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(projects_router)


# ---------------------------------------------------------
# Error envelope: {"error": "..."}
# ---------------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    headers = dict(exc.headers or {})
    message = exc.detail

    if exc.status_code == 405 and request.url.path.rstrip("/") == PROJECTS_PATH:
        headers["Allow"] = ", ".join(ALLOWED_METHODS)
        message = f"Method {request.method} Not Allowed"

    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report bad request shape as 400 (not FastAPI's default 422)
    fields = []
    for err in exc.errors():
        loc = [part for part in err.get("loc", ()) if isinstance(part, str) and part not in ("body", "query")]
        if loc and loc[0] not in fields:
            fields.append(loc[0])

    message = f"Invalid fields: {', '.join(fields)}" if fields else "Invalid request body"
    if IS_DEV:
        print(f"[PROJECTS] Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}

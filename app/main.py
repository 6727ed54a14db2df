import logging
import os
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.endpoints import auth as auth_endpoints
from app.api.endpoints import contests as contest_endpoints
from app.api.endpoints import registrations as registration_endpoints
from app.api.endpoints import teams as team_endpoints
from app.api.endpoints import mentors as mentor_endpoints
from app.api.endpoints import chat as chat_endpoints
from app.core.config import settings
from app.core.database import init_db
from app.core.exceptions import ContestHubError
from app.core.logging_config import setup_logging
from app.services.upload_service import UPLOAD_URL_PREFIX

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Contest Hub API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uploaded contest banners
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Include routers
app.include_router(auth_endpoints.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(contest_endpoints.router, prefix="/api/contests", tags=["Contests"])
app.include_router(registration_endpoints.router, prefix="/api/registrations", tags=["Registrations"])
app.include_router(team_endpoints.router, prefix="/api/teams", tags=["Teams"])
app.include_router(mentor_endpoints.router, prefix="/api/mentors", tags=["Mentors"])
app.include_router(chat_endpoints.router, prefix="/api/chat", tags=["Chat"])


@app.exception_handler(ContestHubError)
async def contest_hub_error_handler(request: Request, exc: ContestHubError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.code},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}" for err in errors
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail or "Invalid request", "error": "validation_error"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal Server Error", "error": "internal_error"}
    if settings.ENVIRONMENT == "development":
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@app.on_event("startup")
def startup_event():
    init_db()
    logger.info("Database ready at %s", settings.DATABASE_URL)


@app.get("/api/health", tags=["Health"])
async def health():
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)

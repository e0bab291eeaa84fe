import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from core.exceptions import PescaException
from core.middleware import RequestLoggingMiddleware
from core.storage import init_storage, upload_root

from db import Base, engine
from core.config import settings
from core.logging import logger

from models.user import User  # noqa: F401
from models.tournament import Tournament  # noqa: F401
from models.pond import Pond  # noqa: F401
from models.zone import Zone  # noqa: F401
from models.area import Area  # noqa: F401
from models.registration import Registration  # noqa: F401
from models.area_selection import AreaSelection  # noqa: F401
from models.catch import Catch  # noqa: F401

# ROUTES
from api.routers.auth import router as auth_router
from api.routers.tournaments import router as tournaments_router
from api.routers.ponds import router as ponds_router
from api.routers.zones import router as zones_router
from api.routers.areas import router as areas_router
from api.routers.registrations import router as registrations_router
from api.routers.catches import router as catches_router


app = FastAPI(title="Pesca Pro API", version="1.0.0")

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_detail(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form"))
    message = str(first.get("msg", "Invalid value")).replace("Value error, ", "", 1)
    return f"{field}: {message}" if field else message


@app.exception_handler(PescaException)
async def pesca_exception_handler(request: Request, exc: PescaException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "type": exc.error_type},
        headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": _validation_detail(exc), "type": "validation_error"}
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "type": "validation_error"}
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    error_traceback = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {error_traceback}")
    if settings.is_production:
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": "server_error"}
        )
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


@app.on_event("startup")
async def startup_event():
    logger.info("Starting up application...")
    init_storage()

    # Schema is normally managed by alembic (see start.py)
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application...")


@app.get("/api/health")
async def health_check():
    return {"status": "OK"}


app.mount("/uploads", StaticFiles(directory=str(upload_root()), check_dir=False), name="uploads")

app.include_router(auth_router, prefix="/api", tags=["Authentication"])
app.include_router(tournaments_router, prefix="/api")
app.include_router(ponds_router, prefix="/api")
app.include_router(zones_router, prefix="/api")
app.include_router(areas_router, prefix="/api")
app.include_router(registrations_router, prefix="/api")
app.include_router(catches_router, prefix="/api")

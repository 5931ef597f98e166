"""
FastAPI app assembly: logging, middleware, error mapping and router wiring.
"""
import logging

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from promptscope import __version__
from promptscope.api.auth import has_identity_headers
from promptscope.api.categories import router as categories_router
from promptscope.api.teams import router as teams_router
from promptscope.errors import CategoryError
from promptscope.utils.settings import dev_mode_active, get_settings

# Configure logging
LOG_LEVEL_NAME = get_settings().log_level
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

if dev_mode_active():
    logger.warning("DEV_MODE is enabled: every request is served as dev@localhost")

# Database schema is managed by Alembic migrations.
app = FastAPI(
    title="Prompt Category Service",
    description="Scoped prompt categories with per-viewer visibility and counts.",
    version=__version__,
)

origins = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware: enforce read-only for unauthenticated requests
@app.middleware("http")
async def enforce_readonly_for_guests(request: Request, call_next):
    if request.method in ("POST", "PUT", "PATCH", "DELETE") and not dev_mode_active():
        if not has_identity_headers(request):
            return JSONResponse(
                {"detail": "Guest mode is read-only. Sign in to perform changes."},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
    return await call_next(request)


@app.exception_handler(CategoryError)
async def handle_category_error(request: Request, exc: CategoryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        {"detail": "Validation failed", "error": "ValidationError", "errors": errors},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}


app.include_router(categories_router)
app.include_router(teams_router)

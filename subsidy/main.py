from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .errors import SubsidyError
from .routers import calculate, cities
from .store import build_region_store

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("subsidy")

app = FastAPI(
    title="Housing Subsidy Calculator",
    description="One-time housing subsidy calculator by region and household",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error responses: always {"success": false, "error": ...} ---

@app.exception_handler(SubsidyError)
def handle_subsidy_error(request: Request, exc: SubsidyError):
    if exc.status_code >= 500:
        # Detail stays in the log; the caller gets the generic message
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.public_message},
    )


@app.exception_handler(RequestValidationError)
def handle_unparseable_body(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Request body must be a valid JSON object"},
    )


# API routes
app.include_router(calculate.router, prefix="/api")
app.include_router(cities.router, prefix="/api")

# Serve the calculator form
frontend_path = os.path.join(os.path.dirname(__file__), "..", "frontend")
if os.path.exists(frontend_path):
    static_path = os.path.join(frontend_path, "static")
    if os.path.exists(static_path):
        app.mount("/static", StaticFiles(directory=static_path), name="static")

    @app.get("/", include_in_schema=False)
    def serve_frontend():
        return FileResponse(os.path.join(frontend_path, "index.html"))


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.on_event("startup")
def load_region_store():
    """Build the reference store once; requests only ever read it."""
    logger.info(
        "Starting with formula=%s, regions from %s",
        settings.FORMULA_VARIANT.value, settings.REGION_SOURCE.value,
    )
    app.state.region_store = build_region_store(settings)

"""
Vietnamese History Explorer - Main FastAPI Application

REST API over the periods, sub-periods and events collections that the
explorer pages (list, map, timeline, detail) consume.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.api.router import api_router
from app.config import get_settings
from app.db.session import init_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting %s (%s)", settings.project_name, settings.environment)
    if settings.auto_create_tables:
        init_db()
        logger.info("Database tables ensured")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.project_name,
    description="""
    Vietnamese History Explorer API

    Browse Vietnamese history by period, on a map and along a timeline.

    ## Collections

    - **Periods**: top-level eras with display order and color
    - **Sub-periods**: dynasties and phases inside a period
    - **Events**: dated, located events with key figures and tags
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"Invalid {location}: {first.get('msg', 'bad request')}" if location else "Bad request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


# Include API router
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint - system status."""
    return {
        "name": settings.project_name,
        "status": "running",
        "version": __version__,
    }

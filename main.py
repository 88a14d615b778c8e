from contextlib import asynccontextmanager
from typing import Optional
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, settings as default_settings
from core.route_guard import RouteGuardMiddleware
from database import Database
from services.media_host import CloudinaryClient

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    media_host: Optional[CloudinaryClient] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration, defaults to the environment-driven settings
        database: Storage client, built from ``settings.DATABASE_URL`` if omitted
        media_host: Media host client, built from the Cloudinary settings if omitted
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    owns_database = database is None
    database = database or Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    media_host = media_host or CloudinaryClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_tables()
        logger.info("Database ready")
        yield
        if owns_database:
            database.dispose()

    app = FastAPI(
        title="Reels API",
        description="Short video sharing: accounts, uploads, feed, likes and comments.",
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Authentication", "description": "Register, login and logout"},
            {"name": "Reels", "description": "Feed, uploads, likes and comments"},
        ],
    )
    app.state.settings = settings
    app.state.database = database
    app.state.media_host = media_host

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Malformed input is a 400 like every other validation failure
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": message},
        )

    # Add CORS middleware with proper configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RouteGuardMiddleware, cookie_name=settings.SESSION_COOKIE_NAME)

    # Routers
    from routers import auth, reels, pages

    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(reels.router, prefix="/reels", tags=["Reels"])
    app.include_router(pages.router)

    @app.get("/health", include_in_schema=False)
    async def health_check():
        return JSONResponse(
            status_code=200,
            content={"status": "ok", "message": "Service is running"}
        )

    return app


app = create_app()

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from showdir.config.config import settings
from showdir.routers import listing as listing_router
from showdir.schemas.styles import DEFAULT_STYLES
from showdir.services.listing import DirectoryListing

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer(),
    ]
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    options = settings.listing_options()
    app.state.listing = DirectoryListing(options=options, styles=DEFAULT_STYLES)
    logger.info(
        "startup",
        root=options.root,
        base_dir=options.base_dir,
        show_dotfiles=options.show_dotfiles,
        handle_error=options.handle_error,
    )

    yield

    logger.info("shutdown")


app = FastAPI(
    title="showdir",
    description="HTML directory listings for a static file server",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.include_router(listing_router.router)

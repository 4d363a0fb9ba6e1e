"""Directory listing endpoint — every GET/HEAD path is answered with an index page."""

from collections.abc import Awaitable, Callable

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, Response

from showdir.services.listing import DirectoryListing, ListingError

router = APIRouter(tags=["listing"])
logger = structlog.get_logger(__name__)

NextHandler = Callable[[Request], Awaitable[Response]]


def get_listing(request: Request) -> DirectoryListing:
    return request.app.state.listing


async def not_found(request: Request) -> Response:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Not found: {request.url.path}")


def get_next_handler() -> NextHandler:
    """The handler a failed listing is deferred to when errors are not propagated."""
    return not_found


def _raw_path(request: Request) -> str:
    raw = request.scope.get("raw_path")
    if raw:
        # Some servers pass the query string along in raw_path.
        return raw.decode("utf-8", "surrogateescape").split("?", 1)[0]
    return request.url.path


@router.api_route("/{request_path:path}", methods=["GET", "HEAD"], response_class=HTMLResponse)
async def show_dir(
    request: Request,
    request_path: str,
    listing: DirectoryListing = Depends(get_listing),
    next_handler: NextHandler = Depends(get_next_handler),
) -> Response:
    try:
        page = await listing.render(
            _raw_path(request),
            query=request.url.query,
            host=request.headers.get("host", ""),
        )
    except ListingError as exc:
        logger.warning("listing_failed", stage=exc.stage, path=exc.path, error=str(exc.cause))
        if listing.options.handle_error:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Could not list {request_path or '/'}: {exc.stage} failed ({exc.cause})",
            ) from exc
        return await next_handler(request)

    return HTMLResponse(content=page.html, status_code=status.HTTP_200_OK, headers=page.headers)

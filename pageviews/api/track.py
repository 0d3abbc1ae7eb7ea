# POST /track

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pageviews.api.deps import get_event_store
from pageviews.core.errors import StoreError
from pageviews.services.event_store import EventStore
import structlog

logger = structlog.get_logger()
router = APIRouter(tags=["pageviews"])


@router.post("/track", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def track_pageview(
        page: str | None = Query(default=None, description="Viewed page, e.g. /pricing"),
        store: EventStore = Depends(get_event_store)
):
    """
    Record a single pageview.

    - **page**: Viewed resource (required, non-empty)

    Any other method on this path is answered with 405 by the router.
    """
    if not page:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing page parameter"
        )

    try:
        await store.record_pageview(page)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        ) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)

# GET /live

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pageviews.api.deps import get_live_counter
from pageviews.services.live import LiveCounter

router = APIRouter(tags=["pageviews"])

STREAM_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.get("/live", response_class=StreamingResponse)
async def live_count(live: LiveCounter = Depends(get_live_counter)):
    """
    Stream the running pageview count as Server-Sent Events.

    One `data: <count>` frame is pushed per polling interval until the
    client disconnects, the count query fails, or the service shuts down.
    Starlette cancels the stream task when the client goes away.
    """
    return StreamingResponse(live.stream(), headers=STREAM_HEADERS)

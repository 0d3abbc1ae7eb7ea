import pytest
from fastapi import HTTPException

from pageviews.api.track import track_pageview
from pageviews.core.errors import StoreError


class BrokenStore:
    async def record_pageview(self, page):
        raise StoreError("disk I/O error")


@pytest.mark.asyncio
async def test_store_error_is_chained_into_500():
    with pytest.raises(HTTPException) as exc_info:
        await track_pageview(page="/home", store=BrokenStore())

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "disk I/O error"
    assert isinstance(exc_info.value.__cause__, StoreError)


@pytest.mark.asyncio
async def test_empty_page_never_reaches_store():
    with pytest.raises(HTTPException) as exc_info:
        await track_pageview(page="", store=BrokenStore())

    assert exc_info.value.status_code == 400

from fastapi import Request

from pageviews.services.event_store import EventStore
from pageviews.services.live import LiveCounter


def get_event_store(request: Request) -> EventStore:
    """Dependency for the store built at startup"""
    return request.app.state.event_store


def get_live_counter(request: Request) -> LiveCounter:
    return request.app.state.live_counter

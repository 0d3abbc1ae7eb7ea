"""
Run the pageview telemetry server.

Usage:
    python -m pageviews
"""
import uvicorn

from pageviews.core.config import settings


def main():
    uvicorn.run(
        "pageviews.main:app",
        host=settings.host,
        port=settings.port,
        # Open /live streams get this long to end before tasks are cancelled
        timeout_graceful_shutdown=int(settings.live_interval_seconds) + 1,
    )


if __name__ == "__main__":
    main()

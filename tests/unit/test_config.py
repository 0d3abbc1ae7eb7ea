import pytest
from pydantic import ValidationError

from pageviews.core.config import Settings


def test_synchronous_is_normalized():
    assert Settings(sqlite_synchronous=" full ").sqlite_synchronous == "FULL"


def test_unknown_synchronous_mode_is_rejected():
    """Only values SQLite understands reach the PRAGMA"""
    with pytest.raises(ValidationError):
        Settings(sqlite_synchronous="BOGUS;")


def test_live_interval_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(live_interval_seconds=0)

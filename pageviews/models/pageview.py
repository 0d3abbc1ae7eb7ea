# SQLAlchemy models

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Text, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Pageview(Base):
    __tablename__ = "pageviews"

    id = Column(Integer, primary_key=True)
    page = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        CheckConstraint("length(page) > 0", name="ck_pageviews_page_not_empty"),
        # ids are never reused, so insertion order is id order
        {"sqlite_autoincrement": True},
    )

# lawbook/models/session.py
from sqlalchemy import JSON, Column, DateTime, Integer, String

from lawbook.db import Base


class WebSession(Base):
    """Server-side session state keyed by the opaque cookie token."""
    __tablename__ = "sessions"

    token = Column(String(64), primary_key=True)
    user_id = Column(Integer, index=True, nullable=True)  # users.id once logged in
    data = Column(JSON, nullable=False, default=dict)
    expiry = Column(DateTime, index=True, nullable=False)

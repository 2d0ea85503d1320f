"""
Session Entity

One authenticated device or browser instance.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from backoffice.domain.base import utcnow


class Session(SQLModel, table=True):
    """
    Session entity - holds the current token pair of one device.

    Business Rules:
    - access_token must equal the bearer token presented on each request
    - Refresh rewrites tokens and expires_at in place (same id)
    - At most MAX_SESSIONS_PER_USER live sessions per user, oldest evicted
    - provider_token is the upstream OAuth access token, revoked on logout
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    access_token: str = Field(sa_column=Column(Text, nullable=False))
    refresh_token: str = Field(sa_column=Column(Text, nullable=False))
    provider_token: Optional[str] = Field(default=None, sa_column=Column(Text))

    device_id: Optional[str] = Field(default=None, max_length=100)
    user_agent: Optional[str] = Field(default=None, sa_column=Column(Text))
    ip_address: Optional[str] = Field(default=None, max_length=50)

    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_session_access_token", "access_token"),
        Index("idx_session_expires_at", "expires_at"),
        Index("idx_session_user_created", "user_id", "created_at"),
    )

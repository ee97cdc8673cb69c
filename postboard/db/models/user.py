"""SQLAlchemy model for postboard users."""

from __future__ import annotations

import uuid
from datetime import datetime
from datetime import timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime
from sqlalchemy import LargeBinary
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy import Text
from sqlalchemy import UniqueConstraint
from sqlalchemy import Uuid
from sqlalchemy import func
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship


class Base(DeclarativeBase):
    """Declarative base for postboard ORM models."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


if TYPE_CHECKING:
    from postboard.db.models.api_key import ApiKey
    from postboard.db.models.post import Post
    from postboard.db.models.session import UserSession


class User(Base):
    """Registered account."""

    __tablename__ = "user"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="user_pkey"),
        UniqueConstraint("email", name="user_email_key"),
        UniqueConstraint("username", name="user_username_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    username: Mapped[str] = mapped_column(String(16), nullable=False)
    # raw Argon2id digest salted with the user id
    password: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    sessions: Mapped[list["UserSession"]] = relationship("UserSession", back_populates="user")
    posts: Mapped[list["Post"]] = relationship("Post", back_populates="user")
    api_keys: Mapped[list["ApiKey"]] = relationship("ApiKey", back_populates="user")

"""Account model backing the local identity provider."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Uuid

from meetfood.db.session import Base


class Account(Base):
    """Credentials owned by the identity provider, never read by the User Directory."""

    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    subject = Column(String(64), unique=True, nullable=False, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

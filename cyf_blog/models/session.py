import secrets
import sqlalchemy as sa
from sqlalchemy.orm import relationship
from datetime import datetime, timedelta

from cyf_blog.core.config import settings
from cyf_blog.db.base_class import Base, generate_id, utcnow, as_utc

class Session(Base):
    __tablename__ = 'sessions'

    id = sa.Column(sa.String(32), primary_key=True, default=generate_id)
    session_token = sa.Column(sa.String, unique=True, index=True, nullable=False)
    user_id = sa.Column(sa.String(32), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    expires = sa.Column(sa.DateTime(timezone=True), nullable=False)
    user_agent = sa.Column(sa.String, nullable=True)
    created_at = sa.Column(sa.DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="sessions")

    def is_expired(self, now: datetime | None = None) -> bool:
        return as_utc(self.expires) <= (now or utcnow())

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(32)

    @staticmethod
    def get_default_expiry() -> datetime:
        return utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

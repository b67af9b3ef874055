import secrets
import sqlalchemy as sa
from datetime import datetime, timedelta

from cyf_blog.core.config import settings
from cyf_blog.db.base_class import Base, generate_id, utcnow, as_utc

class VerificationToken(Base):
    __tablename__ = 'verification_tokens'

    id = sa.Column(sa.String(32), primary_key=True, default=generate_id)
    identifier = sa.Column(sa.String, index=True, nullable=False)  # email being verified
    token = sa.Column(sa.String, unique=True, index=True, nullable=False)
    expires = sa.Column(sa.DateTime(timezone=True), nullable=False)
    created_at = sa.Column(sa.DateTime(timezone=True), default=utcnow)

    def is_expired(self, now: datetime | None = None) -> bool:
        return as_utc(self.expires) < (now or utcnow())

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(32)

    @staticmethod
    def get_default_expiry() -> datetime:
        return utcnow() + timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS)

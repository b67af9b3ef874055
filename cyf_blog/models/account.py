import sqlalchemy as sa
from sqlalchemy.orm import relationship

from cyf_blog.db.base_class import Base, generate_id, utcnow

class Account(Base):
    """A third-party login linked to a user."""
    __tablename__ = 'accounts'
    __table_args__ = (
        sa.UniqueConstraint('provider', 'provider_account_id', name='uq_accounts_provider_account'),
    )

    id = sa.Column(sa.String(32), primary_key=True, default=generate_id)
    user_id = sa.Column(sa.String(32), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    type = sa.Column(sa.String, nullable=False)
    provider = sa.Column(sa.String, nullable=False)
    provider_account_id = sa.Column(sa.String, nullable=False)
    refresh_token = sa.Column(sa.Text, nullable=True)
    access_token = sa.Column(sa.Text, nullable=True)
    expires_at = sa.Column(sa.Integer, nullable=True)
    token_type = sa.Column(sa.String, nullable=True)
    scope = sa.Column(sa.String, nullable=True)
    id_token = sa.Column(sa.Text, nullable=True)
    created_at = sa.Column(sa.DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="accounts")

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from datetime import datetime
from typing import List

from cyf_blog.db.base_class import utcnow
from cyf_blog.models.session import Session

async def create_session(
    db: AsyncSession, *, user_id: str, user_agent: str | None = None, expires: datetime | None = None
) -> Session:
    """Create a session row for a freshly authenticated user."""
    db_obj = Session(
        user_id=user_id,
        session_token=Session.generate_token(),
        expires=expires or Session.get_default_expiry(),
        user_agent=user_agent,
    )
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def get_session_by_token(db: AsyncSession, *, session_token: str) -> Session | None:
    result = await db.execute(select(Session).where(Session.session_token == session_token))
    return result.scalar_one_or_none()

async def get_session(db: AsyncSession, *, session_id: str) -> Session | None:
    return await db.get(Session, session_id)

async def get_sessions_for_user(db: AsyncSession, *, user_id: str) -> List[Session]:
    stmt = select(Session).where(Session.user_id == user_id).order_by(Session.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())

async def delete_session(db: AsyncSession, *, session_obj: Session | None) -> None:
    if session_obj:
        await db.delete(session_obj)
        await db.commit()

async def delete_expired_sessions(db: AsyncSession, *, user_id: str) -> int:
    stmt = delete(Session).where(Session.user_id == user_id, Session.expires <= utcnow())
    result = await db.execute(stmt)
    await db.commit()
    return result.rowcount or 0

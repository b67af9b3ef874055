from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func, or_
import logging
from typing import List, Tuple

from cyf_blog.models.user import User
from cyf_blog.schemas.user import UserCreate, UserUpdateInternal
from cyf_blog.security import get_password_hash

logger = logging.getLogger(__name__)

async def get_user_by_id(db: AsyncSession, *, user_id: str) -> User | None:
    logger.debug(f"Fetching user by ID: {user_id}")
    result = await db.execute(select(User).filter(User.id == user_id))
    user = result.scalars().first()
    if not user:
        logger.warning(f"User with ID {user_id} not found.")
    return user

async def get_user_by_email(db: AsyncSession, *, email: str) -> User | None:
    logger.debug(f"Fetching user by email: {email}")
    result = await db.execute(select(User).filter(func.lower(User.email) == email.lower()))
    return result.scalars().first()

async def get_user_by_username(db: AsyncSession, *, username: str) -> User | None:
    logger.debug(f"Fetching user by username: {username}")
    result = await db.execute(select(User).filter(User.username == username))
    return result.scalars().first()

async def get_user_by_login(db: AsyncSession, *, login: str) -> User | None:
    """Look a user up by username or email."""
    stmt = select(User).filter(
        or_(User.username == login, func.lower(User.email) == login.lower())
    )
    result = await db.execute(stmt)
    return result.scalars().first()

async def get_users(db: AsyncSession, *, skip: int = 0, limit: int = 15) -> Tuple[List[User], int]:
    total = await db.scalar(select(func.count()).select_from(User))
    result = await db.execute(
        select(User).order_by(User.created_at.desc(), User.id).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total or 0

async def create_user(db: AsyncSession, *, obj_in: UserCreate, user_id: str | None = None) -> User:
    user_data = obj_in.model_dump()
    hashed_password = get_password_hash(user_data.pop("password"))

    db_user = User(
        username=user_data["username"],
        nickname=user_data.get("nickname"),
        email=user_data["email"],
        image=user_data.get("image"),
        role=user_data.get("role"),
        hashed_password=hashed_password,
    )
    if user_id:
        db_user.id = user_id

    db.add(db_user)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error creating user {obj_in.username}: {e}", exc_info=True)
        raise
    await db.refresh(db_user)
    logger.info(f"Created user {db_user.id} ({db_user.username}).")
    return db_user

async def update_user_internal(db: AsyncSession, *, db_obj: User, obj_in: UserUpdateInternal) -> User:
    update_data = obj_in.model_dump(exclude_unset=True)
    logger.info(f"Internally updating user {db_obj.id}. Fields: {sorted(update_data)}")
    for field, value in update_data.items():
        if hasattr(db_obj, field):
            setattr(db_obj, field, value)
    db.add(db_obj)
    try:
        await db.commit()
        await db.refresh(db_obj)
        return db_obj
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error during internal update for user {db_obj.id}: {e}", exc_info=True)
        raise

async def delete_user(db: AsyncSession, *, db_obj: User) -> User:
    await db.delete(db_obj)
    await db.commit()
    logger.info(f"Deleted user {db_obj.id}.")
    return db_obj

import logging
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, UploadFile, status

from cyf_blog import crud, models, schemas
from cyf_blog.core.config import settings
from cyf_blog.db.base_class import generate_id
from cyf_blog.security import create_access_token, verify_password
from cyf_blog.services import user_service

logger = logging.getLogger(__name__)

async def issue_access_token(db: AsyncSession, user: models.User, user_agent: str | None = None) -> schemas.TokenWithUser:
    """Open a session for `user` and return a JWT bound to it."""
    purged = await crud.crud_session.delete_expired_sessions(db, user_id=user.id)
    if purged:
        logger.info(f"Purged {purged} expired sessions for user {user.id}")

    session_obj = await crud.crud_session.create_session(db, user_id=user.id, user_agent=user_agent)
    token_data = {"sub": user.id, "sid": session_obj.session_token, "username": user.username}
    access_token = create_access_token(
        data=token_data, expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return schemas.TokenWithUser(
        access_token=access_token, user=schemas.User.model_validate(user)
    )

async def register_user(
    db: AsyncSession,
    user_in: schemas.UserRegister,
    file: UploadFile | None,
    user_agent: str | None = None,
) -> schemas.TokenWithUser:
    """
    Creates a user with an uploaded avatar and signs them in.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Avatar file is required.")
    await user_service.validate_avatar(file)
    await user_service.ensure_unique(db, username=user_in.username, email=user_in.email)

    user_id = generate_id()
    image_url = await user_service.store_avatar(user_id, file)
    try:
        db_user = await crud.crud_user.create_user(
            db=db,
            obj_in=schemas.UserCreate(**user_in.model_dump(), image=image_url),
            user_id=user_id,
        )
    except Exception as e:
        logger.error(f"Error during user registration for {user_in.email}: {e}", exc_info=True)
        user_service.discard_avatar(image_url)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during registration.",
        )
    return await issue_access_token(db, db_user, user_agent=user_agent)

async def login(db: AsyncSession, credentials: schemas.UserLogin, user_agent: str | None = None) -> schemas.TokenWithUser:
    user = await crud.crud_user.get_user_by_login(db, login=credentials.username)
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info(f"User {user.id} logged in.")
    return await issue_access_token(db, user, user_agent=user_agent)

async def logout(db: AsyncSession, session_obj: models.Session) -> None:
    await crud.crud_session.delete_session(db, session_obj=session_obj)
    logger.info(f"Session {session_obj.id} of user {session_obj.user_id} closed.")

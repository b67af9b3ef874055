import logging
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from cyf_blog import crud, schemas
from cyf_blog.db.base_class import utcnow
from cyf_blog.services import notification_service
from cyf_blog.utils.cache import email_verify_key

logger = logging.getLogger(__name__)

async def verify_email(db: AsyncSession, cache, token: str) -> schemas.StatusMessage:
    db_verification_token = await crud.crud_verification_token.get_verification_token(db=db, token=token)
    if not db_verification_token or db_verification_token.is_expired():
        if db_verification_token:
            await crud.crud_verification_token.delete_verification_token(db=db, token_obj=db_verification_token)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired verification token.",
        )

    user = await crud.crud_user.get_user_by_email(db, email=db_verification_token.identifier)
    if not user:
        await crud.crud_verification_token.delete_verification_token(db=db, token_obj=db_verification_token)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User associated with token not found.",
        )

    if not user.email_verified:
        user = await crud.crud_user.update_user_internal(
            db, db_obj=user, obj_in=schemas.UserUpdateInternal(email_verified=utcnow())
        )
        logger.info(f"Email of user {user.id} verified.")

    await crud.crud_verification_token.delete_verification_token(db=db, token_obj=db_verification_token)
    await cache.delete(email_verify_key(user.id))
    await notification_service.push_email_verified(user)
    return schemas.StatusMessage(status="email_verified")

import logging
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, UploadFile, status

from cyf_blog import crud, models, schemas
from cyf_blog.core.config import settings
from cyf_blog.i18n import translate, normalize_language
from cyf_blog.services.mail_service import mail_service, current_year
from cyf_blog.utils.cache import email_verify_key
from cyf_blog.utils.storage import gcs_storage, StorageNotConfigured

logger = logging.getLogger(__name__)

# --- Avatars ---
async def validate_avatar(file: UploadFile) -> None:
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No filename provided.")
    if file.content_type not in settings.AVATAR_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported avatar type {file.content_type}.",
        )
    content = await file.read()
    await file.seek(0)
    if len(content) >= settings.AVATAR_MAX_BYTES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Avatar file is too large.")

async def store_avatar(user_id: str, file: UploadFile) -> str:
    """Upload an avatar and return its public URL."""
    safe_filename = f"{uuid.uuid4()}_{file.filename.replace(' ', '_')}"
    blob_name = f"avatars/{user_id}/{safe_filename}"
    try:
        uploaded_blob_name = await gcs_storage.upload_file_async(
            file=file, blob_name=blob_name, content_type=file.content_type
        )
    except StorageNotConfigured as e:
        logger.error(f"Avatar upload for user {user_id} failed: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="File storage is not available.")
    except Exception as e:
        logger.error(f"Error during avatar upload for user {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to upload avatar.")
    return gcs_storage.public_url(uploaded_blob_name)

def discard_avatar(image_url: str | None) -> None:
    blob_name = gcs_storage.blob_name_from_url(image_url)
    if not blob_name:
        return
    try:
        gcs_storage.delete_blob(blob_name)
    except Exception as e:
        logger.error(f"Failed to delete avatar {blob_name} from GCS: {e}")

# --- Lookups ---
async def ensure_unique(
    db: AsyncSession, *, username: str | None = None, email: str | None = None, exclude_id: str | None = None
) -> None:
    if username:
        existing = await crud.crud_user.get_user_by_username(db, username=username)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already registered")
    if email:
        existing = await crud.crud_user.get_user_by_email(db, email=email)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

async def is_username_available(db: AsyncSession, username: str | None) -> bool:
    if not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="username is required")
    return await crud.crud_user.get_user_by_username(db, username=username) is None

async def is_email_available(db: AsyncSession, email: str | None) -> bool:
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="email is required")
    return await crud.crud_user.get_user_by_email(db, email=email) is None

async def get_user(db: AsyncSession, user_id: str) -> models.User:
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User id is required")
    user = await crud.crud_user.get_user_by_id(db, user_id=user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user

async def list_users(db: AsyncSession, *, page: int, page_size: int) -> schemas.UserPage:
    users, total = await crud.crud_user.get_users(db, skip=(page - 1) * page_size, limit=page_size)
    return schemas.UserPage(
        items=[schemas.User.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )

# --- Updates ---
async def update_user(
    db: AsyncSession,
    user: models.User,
    user_in: schemas.UserUpdate,
    file: UploadFile | None = None,
    cache=None,
) -> models.User:
    update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)
    await ensure_unique(
        db,
        username=update_data.get("username") if update_data.get("username") != user.username else None,
        email=update_data.get("email") if update_data.get("email") != user.email else None,
        exclude_id=user.id,
    )
    old_email = user.email
    email_changed = "email" in update_data and update_data["email"].lower() != old_email.lower()
    if email_changed:
        logger.info(f"User {user.id} changed email, clearing verification.")
        update_data["email_verified"] = None

    old_image = user.image
    if file is not None:
        await validate_avatar(file)
        update_data["image"] = await store_avatar(user.id, file)

    if not update_data:
        logger.warning(f"Update for user {user.id} called with no data to update.")
        return user

    try:
        updated = await crud.crud_user.update_user_internal(
            db, db_obj=user, obj_in=schemas.UserUpdateInternal(**update_data)
        )
    except Exception as e:
        logger.error(f"Error updating user {user.id}: {e}", exc_info=True)
        discard_avatar(update_data.get("image"))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating the user.",
        )

    if email_changed:
        await forget_email_verification(db, cache, user_id=updated.id, email=old_email)
    if file is not None and old_image and old_image != updated.image:
        discard_avatar(old_image)
    return updated

async def delete_user(db: AsyncSession, user: models.User, cache=None) -> schemas.User:
    snapshot = schemas.User.model_validate(user)
    await crud.crud_user.delete_user(db, db_obj=user)
    await forget_email_verification(db, cache, user_id=snapshot.id, email=snapshot.email)
    discard_avatar(snapshot.image)
    return snapshot

# --- Email verification ---
async def forget_email_verification(db: AsyncSession, cache, *, user_id: str, email: str) -> None:
    """Drop outstanding tokens for `email` and the user's resend lock."""
    await crud.crud_verification_token.delete_tokens_for_identifier(db, identifier=email)
    if cache is not None:
        await cache.delete(email_verify_key(user_id))

def verify_link(locale: str, token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/{locale}/admin/verify?token={token}"

async def request_email_verification(
    db: AsyncSession, cache, user: models.User, locale: str | None, lang: str
) -> schemas.StatusMessage:
    """
    Send the verification email at most once per cache window.
    """
    if user.email_verified:
        return schemas.StatusMessage(status="email_already_verified")

    cache_key = email_verify_key(user.id)
    if await cache.get(cache_key):
        logger.info(f"Verification email for user {user.id} already sent recently.")
        return schemas.StatusMessage(status="email_verification_sent")

    locale = normalize_language(locale) or lang
    await crud.crud_verification_token.delete_tokens_for_identifier(db, identifier=user.email)
    token_obj = await crud.crud_verification_token.create_verification_token(
        db,
        obj_in=schemas.VerificationTokenCreate(
            identifier=user.email,
            token=models.VerificationToken.generate_token(),
            expires=models.VerificationToken.get_default_expiry(),
        ),
    )

    result = await mail_service.create(
        user.id,
        schemas.MailOptions(
            to=user.email,
            subject=translate("validation.SUBJECT", lang),
            template=f"email-verify-{locale}",
            context={
                "username": user.nickname or user.username,
                "link": verify_link(locale, token_obj.token),
                "copyright": current_year(),
            },
        ),
    )

    await cache.set(cache_key, "true", settings.EMAIL_VERIFY_CACHE_SECONDS)
    return result

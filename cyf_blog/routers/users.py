from fastapi import APIRouter, Depends, File, Form, Header, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError
from fastapi.exceptions import RequestValidationError
import logging

from cyf_blog import models, schemas, services
from cyf_blog.core.config import settings
from cyf_blog.db.session import get_db
from cyf_blog.dependencies import get_current_user, get_lang, require_version, ensure_self_or_admin
from cyf_blog.i18n import translate
from cyf_blog.utils.cache import get_cache

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/hello", response_model=schemas.ApiResponse[str], deprecated=True)
async def get_hello(lang: str = Depends(get_lang), cache=Depends(get_cache)):
    cache_key = f"user-hello:{lang}"
    cached = await cache.get(cache_key)
    if cached is not None:
        return schemas.ok(cached)
    text = translate("common.HELLO", lang)
    await cache.set(cache_key, text, settings.HELLO_CACHE_SECONDS)
    return schemas.ok(text)

@router.get(
    "/hello2",
    response_model=schemas.ApiResponse[str],
    deprecated=True,
    dependencies=[Depends(get_current_user), Depends(require_version(">=1.0.0"))],
)
async def get_hello2(lang: str = Depends(get_lang)):
    return schemas.ok(translate("common.NEW", lang, args={"name": "Kimmy"}))

@router.get("", response_model=schemas.ApiResponse[schemas.UserPage])
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return schemas.ok(await services.user_service.list_users(db, page=page, page_size=page_size))

@router.post("/email-verify", response_model=schemas.ApiResponse[schemas.StatusMessage])
async def email_verify(
    x_locale: str | None = Header(None),
    lang: str = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    cache=Depends(get_cache),
    current_user: models.User = Depends(get_current_user),
):
    """
    Send the verification email, at most once per five minutes per user.
    """
    result = await services.user_service.request_email_verification(
        db, cache, current_user, locale=x_locale, lang=lang
    )
    return schemas.ok(result)

@router.post("/has-username", response_model=schemas.ApiResponse[bool])
async def has_username(body: schemas.UsernameCheck | None = None, db: AsyncSession = Depends(get_db)):
    """True when the username is still available."""
    username = body.username if body else None
    return schemas.ok(await services.user_service.is_username_available(db, username))

@router.post("/has-email", response_model=schemas.ApiResponse[bool])
async def has_email(body: schemas.EmailCheck | None = None, db: AsyncSession = Depends(get_db)):
    """True when the email is still available."""
    email = body.email if body else None
    return schemas.ok(await services.user_service.is_email_available(db, email))

@router.get("/{user_id}", response_model=schemas.ApiResponse[schemas.User])
async def read_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    user = await services.user_service.get_user(db, user_id)
    return schemas.ok(schemas.User.model_validate(user))

@router.patch("/{user_id}", response_model=schemas.ApiResponse[schemas.User])
async def update_user(
    user_id: str,
    username: str | None = Form(None),
    nickname: str | None = Form(None),
    email: str | None = Form(None),
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    cache=Depends(get_cache),
    current_user: models.User = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, user_id)
    try:
        user_in = schemas.UserUpdate(username=username, nickname=nickname, email=email)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    user = await services.user_service.get_user(db, user_id)
    updated = await services.user_service.update_user(db, user, user_in, file=file, cache=cache)
    return schemas.ok(schemas.User.model_validate(updated))

@router.delete("/{user_id}", response_model=schemas.ApiResponse[schemas.User])
async def delete_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    cache=Depends(get_cache),
    current_user: models.User = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, user_id)
    user = await services.user_service.get_user(db, user_id)
    return schemas.ok(await services.user_service.delete_user(db, user, cache=cache))

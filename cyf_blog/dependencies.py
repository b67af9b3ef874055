from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import re

from cyf_blog import models, schemas, crud, security
from cyf_blog.core.config import settings, COOKIE_TOKEN_KEY, COOKIE_LANG_KEY
from cyf_blog.db.session import get_db
from cyf_blog.i18n import normalize_language
from cyf_blog.models.enums import UserRole

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_request_token(request: Request, bearer: str | None = Depends(oauth2_scheme)) -> str | None:
    """Bearer header first, then the cookie the web client sets after signup/login."""
    return bearer or request.cookies.get(COOKIE_TOKEN_KEY)

async def resolve_session(db: AsyncSession, token: str | None) -> models.Session | None:
    """Validate a JWT and return the live session behind it, or None."""
    if not token:
        return None
    try:
        payload = security.decode_access_token(token)
        token_data = schemas.TokenPayload(**payload)
    except (JWTError, ValidationError):
        return None
    if token_data.sub is None or token_data.sid is None:
        return None

    session_obj = await crud.crud_session.get_session_by_token(db, session_token=token_data.sid)
    if session_obj is None or session_obj.user_id != token_data.sub:
        logger.warning(f"No session {token_data.sid!r} for subject {token_data.sub}")
        return None
    if session_obj.is_expired():
        logger.info(f"Session {session_obj.id} expired")
        return None
    return session_obj

async def get_current_session(
    db: AsyncSession = Depends(get_db), token: str | None = Depends(get_request_token)
) -> models.Session:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    session_obj = await resolve_session(db, token)
    if session_obj is None:
        raise credentials_exception
    return session_obj

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    session_obj: models.Session = Depends(get_current_session),
) -> models.User:
    user = await crud.crud_user.get_user_by_id(db, user_id=session_obj.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

def require_admin(current_user: models.User = Depends(get_current_user)) -> models.User:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The user doesn't have enough privileges. Administrator required.",
        )
    return current_user

def ensure_self_or_admin(current_user: models.User, user_id: str) -> None:
    if current_user.id != user_id and current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only manage your own account.",
        )

# --- Language ---
def get_lang(request: Request) -> str:
    """Query `lang`, then `x-locale`, then the language cookie, then Accept-Language."""
    candidates = [
        request.query_params.get("lang"),
        request.headers.get("x-locale"),
        request.cookies.get(COOKIE_LANG_KEY),
    ]
    accept_language = request.headers.get("accept-language")
    if accept_language:
        candidates.extend(part.split(";")[0] for part in accept_language.split(","))
    for candidate in candidates:
        lang = normalize_language(candidate)
        if lang:
            return lang
    return settings.DEFAULT_LANGUAGE

# --- Client version guard ---
_VERSION_RE = re.compile(r"^\s*v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")
_REQUIREMENT_RE = re.compile(r"^\s*(>=|<=|==|>|<)?\s*(.+)$")

def parse_version(value: str | None) -> tuple[int, int, int] | None:
    if not value:
        return None
    match = _VERSION_RE.match(value)
    if not match:
        return None
    return tuple(int(part or 0) for part in match.groups())

def version_satisfies(version: str | None, requirement: str) -> bool:
    parsed = parse_version(version)
    op, required_raw = _REQUIREMENT_RE.match(requirement).groups()
    required = parse_version(required_raw)
    if parsed is None or required is None:
        return False
    op = op or "=="
    return {
        ">=": parsed >= required,
        "<=": parsed <= required,
        ">": parsed > required,
        "<": parsed < required,
        "==": parsed == required,
    }[op]

def require_version(requirement: str):
    """
    Dependency factory rejecting clients whose `x-version` header does not
    satisfy `requirement`, e.g. ">=1.0.0".
    """
    async def version_checker(x_version: str | None = Header(None)) -> str:
        if not version_satisfies(x_version, requirement):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Client version {x_version or 'unknown'} does not satisfy {requirement}.",
            )
        return x_version
    return version_checker

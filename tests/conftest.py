"""Shared pytest fixtures for API tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

_DB_PATH = Path(tempfile.gettempdir()) / f"cyf-blog-tests-{os.getpid()}.sqlite3"

os.environ.setdefault("SECRET_KEY", "tests-secret-key")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["GCS_BUCKET_NAME"] = "cyf-blog-test"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["FRONTEND_URL"] = "https://chenyifaer.test"
os.environ.pop("REDIS_URL", None)

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from cyf_blog.crud import crud_user
from cyf_blog.db.base_class import utcnow
from cyf_blog.db.session import AsyncSessionLocal, engine
from cyf_blog.main import fastapi_app
from cyf_blog.models import Base, User
from cyf_blog.models.enums import UserRole
from cyf_blog.schemas.user import UserCreate, UserUpdateInternal
from cyf_blog.services import auth_service, mail_service
from cyf_blog.socket_handlers import sid_user_map
from cyf_blog.socket_instance import sio
from cyf_blog.utils.cache import cache
from cyf_blog.utils.storage import gcs_storage

DEFAULT_PASSWORD = "secret-password"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest_asyncio.fixture(autouse=True)
async def _database() -> AsyncIterator[None]:
    """Fresh schema for every test."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(autouse=True)
async def _reset_state() -> AsyncIterator[None]:
    await cache.clear()
    sid_user_map.clear()
    yield
    await cache.clear()
    sid_user_map.clear()


@pytest.fixture(autouse=True)
def storage(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Object storage double: uploads succeed and return the blob name."""

    async def _upload(file, blob_name, content_type):
        return blob_name

    upload = AsyncMock(side_effect=_upload)
    delete = MagicMock()
    monkeypatch.setattr(gcs_storage, "upload_file_async", upload)
    monkeypatch.setattr(gcs_storage, "delete_blob", delete)
    double = MagicMock()
    double.upload = upload
    double.delete = delete
    return double


@pytest.fixture(autouse=True)
def mail_transport(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    send = MagicMock(return_value="msg_test_1")
    monkeypatch.setattr(mail_service, "send_email", send)
    return send


@pytest.fixture(autouse=True)
def socket_emit(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    emit = AsyncMock()
    monkeypatch.setattr(sio, "emit", emit)
    return emit


@pytest.fixture()
def app() -> FastAPI:
    return fastapi_app


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """HTTPX async client bound to the FastAPI app."""

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def make_user():
    async def _make(
        username: str = "yifaer01",
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        role: UserRole = UserRole.USER,
        verified: bool = False,
    ) -> User:
        async with AsyncSessionLocal() as db:
            user = await crud_user.create_user(
                db,
                obj_in=UserCreate(
                    username=username,
                    nickname=username.title(),
                    email=email or f"{username}@example.com",
                    password=password,
                    role=role,
                ),
            )
            if verified:
                user = await crud_user.update_user_internal(
                    db, db_obj=user, obj_in=UserUpdateInternal(email_verified=utcnow())
                )
            return user

    return _make


@pytest.fixture()
def login_as():
    """Open a session for a user and return (headers, access token)."""

    async def _login(user: User) -> tuple[dict[str, str], str]:
        async with AsyncSessionLocal() as db:
            result = await auth_service.issue_access_token(db, user)
        return {"Authorization": f"Bearer {result.access_token}"}, result.access_token

    return _login

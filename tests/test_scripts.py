from datetime import timedelta

import pytest
from sqlalchemy import func, select

from cyf_blog.crud import crud_account, crud_user, crud_verification_token
from cyf_blog.db.base_class import utcnow
from cyf_blog.db.session import AsyncSessionLocal
from cyf_blog.models import Account, Session, VerificationToken
from cyf_blog.models.enums import UserRole
from cyf_blog.schemas import AccountCreate, VerificationTokenCreate
from scripts.create_admin import create_or_promote_admin
from scripts.delete_user_by_email import delete_user_and_associated_data


@pytest.mark.asyncio
async def test_create_admin_creates_verified_admin():
    await create_or_promote_admin("admin001", "admin@example.com", "admin-password")

    async with AsyncSessionLocal() as db:
        admin = await crud_user.get_user_by_email(db, email="admin@example.com")
    assert admin.role == UserRole.ADMIN
    assert admin.email_verified is not None


@pytest.mark.asyncio
async def test_create_admin_promotes_existing_user(make_user):
    user = await make_user()

    await create_or_promote_admin("ignored1", user.email, None)

    async with AsyncSessionLocal() as db:
        promoted = await crud_user.get_user_by_id(db, user_id=user.id)
    assert promoted.role == UserRole.ADMIN
    assert promoted.username == "yifaer01"


@pytest.mark.asyncio
async def test_delete_user_removes_related_rows(make_user, login_as):
    user = await make_user()
    await login_as(user)
    async with AsyncSessionLocal() as db:
        await crud_account.create_account(
            db, obj_in=AccountCreate(type="oauth", provider="github", provider_account_id="1"), user_id=user.id
        )
        await crud_verification_token.create_verification_token(
            db,
            obj_in=VerificationTokenCreate(identifier=user.email, token="t", expires=utcnow() + timedelta(hours=1)),
        )

    async with AsyncSessionLocal() as db:
        await delete_user_and_associated_data(db, user.email)

    async with AsyncSessionLocal() as db:
        assert await crud_user.get_user_by_id(db, user_id=user.id) is None
        for model in (Account, Session, VerificationToken):
            assert await db.scalar(select(func.count()).select_from(model)) == 0

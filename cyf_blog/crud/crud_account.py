from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List

from cyf_blog.models.account import Account
from cyf_blog.schemas.account import AccountCreate

async def create_account(db: AsyncSession, *, obj_in: AccountCreate, user_id: str) -> Account:
    db_obj = Account(**obj_in.model_dump(), user_id=user_id)
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj

async def get_account(db: AsyncSession, *, account_id: str) -> Account | None:
    return await db.get(Account, account_id)

async def get_account_by_provider(
    db: AsyncSession, *, provider: str, provider_account_id: str
) -> Account | None:
    stmt = select(Account).where(
        Account.provider == provider, Account.provider_account_id == provider_account_id
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()

async def get_accounts_for_user(db: AsyncSession, *, user_id: str) -> List[Account]:
    result = await db.execute(select(Account).where(Account.user_id == user_id))
    return list(result.scalars().all())

async def delete_account(db: AsyncSession, *, account_obj: Account) -> None:
    await db.delete(account_obj)
    await db.commit()

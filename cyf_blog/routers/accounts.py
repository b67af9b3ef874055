from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from cyf_blog import crud, models, schemas
from cyf_blog.db.session import get_db
from cyf_blog.dependencies import get_current_user

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("", response_model=schemas.ApiResponse[List[schemas.Account]])
async def list_accounts(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    accounts = await crud.crud_account.get_accounts_for_user(db, user_id=current_user.id)
    return schemas.ok([schemas.Account.model_validate(a) for a in accounts])

@router.post("", response_model=schemas.ApiResponse[schemas.Account], status_code=status.HTTP_201_CREATED)
async def link_account(
    account_in: schemas.AccountCreate,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    existing = await crud.crud_account.get_account_by_provider(
        db, provider=account_in.provider, provider_account_id=account_in.provider_account_id
    )
    if existing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Account already linked")
    account = await crud.crud_account.create_account(db, obj_in=account_in, user_id=current_user.id)
    logger.info(f"Linked {account.provider} account {account.id} to user {current_user.id}")
    return schemas.ok(schemas.Account.model_validate(account))

@router.delete("/{account_id}", response_model=schemas.ApiResponse[schemas.StatusMessage])
async def unlink_account(
    account_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    account = await crud.crud_account.get_account(db, account_id=account_id)
    if not account or account.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    await crud.crud_account.delete_account(db, account_obj=account)
    return schemas.ok(schemas.StatusMessage(status="account_unlinked"))

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cyf_blog import schemas, services
from cyf_blog.db.session import get_db
from cyf_blog.utils.cache import get_cache

router = APIRouter()

@router.get("/verify", response_model=schemas.ApiResponse[schemas.StatusMessage])
async def verify_email_route(
    token: str = Query(...),
    db: AsyncSession = Depends(get_db),
    cache=Depends(get_cache),
):
    return schemas.ok(await services.verification_service.verify_email(db, cache, token))

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cyf_blog import crud, models, schemas
from cyf_blog.db.session import get_db
from cyf_blog.dependencies import get_current_session

router = APIRouter()

@router.get("", response_model=schemas.ApiResponse[List[schemas.Session]])
async def list_sessions(
    db: AsyncSession = Depends(get_db),
    current_session: models.Session = Depends(get_current_session),
):
    """Sessions of the current user, newest first."""
    sessions = await crud.crud_session.get_sessions_for_user(db, user_id=current_session.user_id)
    items = [
        schemas.Session.model_validate(s).model_copy(update={"current": s.id == current_session.id})
        for s in sessions
    ]
    return schemas.ok(items)

@router.delete("/{session_id}", response_model=schemas.ApiResponse[schemas.StatusMessage])
async def revoke_session(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    current_session: models.Session = Depends(get_current_session),
):
    session_obj = await crud.crud_session.get_session(db, session_id=session_id)
    if not session_obj or session_obj.user_id != current_session.user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    await crud.crud_session.delete_session(db, session_obj=session_obj)
    return schemas.ok(schemas.StatusMessage(status="session_revoked"))

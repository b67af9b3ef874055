from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError
from fastapi.exceptions import RequestValidationError
import logging

from cyf_blog import models, schemas, services
from cyf_blog.db.session import get_db
from cyf_blog.dependencies import get_current_session, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=schemas.ApiResponse[schemas.TokenWithUser], status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    nickname: str | None = Form(None),
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
):
    try:
        user_in = schemas.UserRegister(username=username, nickname=nickname, email=email, password=password)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    result = await services.auth_service.register_user(
        db, user_in=user_in, file=file, user_agent=request.headers.get("user-agent")
    )
    return schemas.ok(result)

@router.post("/login", response_model=schemas.ApiResponse[schemas.TokenWithUser])
async def login(
    credentials: schemas.UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    result = await services.auth_service.login(
        db, credentials=credentials, user_agent=request.headers.get("user-agent")
    )
    return schemas.ok(result)

@router.get("/profile", response_model=schemas.ApiResponse[schemas.User])
async def profile(current_user: models.User = Depends(get_current_user)):
    return schemas.ok(schemas.User.model_validate(current_user))

@router.post("/logout", response_model=schemas.ApiResponse[schemas.StatusMessage])
async def logout(
    db: AsyncSession = Depends(get_db),
    session_obj: models.Session = Depends(get_current_session),
):
    await services.auth_service.logout(db, session_obj)
    return schemas.ok(schemas.StatusMessage(status="logged_out"))

# PURPOSE: /user/register, /user/login, /user/me

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from ..api.responses import failure_response, success_response
from ..auth import get_current_user
from ..config import settings
from ..models import UserCreate, UserLogin, UserPublic
from ..rate_limit import limiter
from ..services import user_service
from ..store_db import get_db

router = APIRouter(prefix="/user", tags=["users"])


@router.post("/register")
@limiter.limit(settings.RATE_LIMIT_REGISTER)
def register_user(
    request: Request, response: Response, payload: UserCreate, db: Session = Depends(get_db)
):
    result = user_service.register_user(db, payload)
    if not result.ok:
        return failure_response(result)
    new_user = UserPublic.model_validate(result.value).model_dump(by_alias=True)
    return success_response("Successfully registered", {"newUser": new_user})


@router.post("/login")
@limiter.limit(settings.RATE_LIMIT_LOGIN)
def login(
    request: Request, response: Response, payload: UserLogin, db: Session = Depends(get_db)
):
    result = user_service.login_user(db, payload)
    if not result.ok:
        return failure_response(result)
    return success_response("Successfully authenticated", result.value.model_dump(by_alias=True))


@router.get("/me")
def me(user: UserPublic = Depends(get_current_user)):
    # If token is valid, user is injected
    return success_response("Successfully retrieved user", user.model_dump(by_alias=True))

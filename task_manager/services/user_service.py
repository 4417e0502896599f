"""Registration and login."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import store_db
from ..auth import create_access_token, hash_password, verify_password
from ..db_models import UserDB
from ..models import LoginResult, UserCreate, UserLogin
from ..results import ErrorKind, ServiceResult

logger = logging.getLogger(__name__)


def register_user(db: Session, data: UserCreate) -> ServiceResult[UserDB]:
    if store_db.find_user_by_user_name(db, data.user_name) is not None:
        return ServiceResult.conflict("User Name already registered")

    try:
        user = store_db.create_user(
            db,
            name=data.name,
            user_name=data.user_name,
            password_hash=hash_password(data.password),
        )
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration of the same name
        db.rollback()
        return ServiceResult.conflict("User Name already registered")
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("user registered id=%s", user.id)
    return ServiceResult.success(user)


def login_user(db: Session, data: UserLogin) -> ServiceResult[LoginResult]:
    user = store_db.find_user_by_user_name(db, data.user_name)
    if user is None:
        return ServiceResult.not_found("User not found")
    if not verify_password(data.password, user.password_hash):
        return ServiceResult.failure(ErrorKind.UNAUTHORIZED, "Invalid credentials")

    token = create_access_token(user.id, {"userName": user.user_name})
    return ServiceResult.success(LoginResult(name=user.name, user_name=user.user_name, token=token))

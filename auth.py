from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status
from sqlalchemy.orm import Session

import crud
from database import get_db, User
from errors import Unauthorized
from logging_config import get_logger
from schemas import LoginRequest, SignupRequest, UserOut
from security import create_session, destroy_session, resolve_session

auth_router = APIRouter()
user_router = APIRouter()
logger = get_logger(__name__)


def get_current_user(
    session: Optional[str] = Cookie(default=None),
    db: Session = Depends(get_db),
) -> User:
    user_id = resolve_session(session)
    if user_id is None:
        raise Unauthorized()

    user = crud.get_user(db, user_id)
    if user is None:
        raise Unauthorized()
    return user


@auth_router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    return crud.create_user(db, data)


@auth_router.post("/login", response_model=UserOut)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = crud.authenticate(db, data.email, data.password)
    if user is None:
        logger.info("Failed login attempt")
        raise Unauthorized("Invalid email or password")

    create_session(response, user.id)
    logger.info("User logged in", extra={"user_id": user.id})
    return user


@auth_router.post("/logout")
def logout(response: Response):
    destroy_session(response)
    return {"success": True}


@user_router.get("/user", response_model=UserOut)
def current_user(user: User = Depends(get_current_user)):
    return user

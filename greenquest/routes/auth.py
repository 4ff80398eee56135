from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from greenquest.database.connection import get_db
from greenquest.schemas import CredentialsPayload
from greenquest.services import auth
from greenquest.utils.session import (
    Identity,
    clear_session_cookie,
    end_session,
    require_identity,
    session_token,
    set_session_cookie,
    start_session,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/signup")
async def signup(payload: CredentialsPayload, response: Response, db: Session = Depends(get_db)) -> dict:
    user = auth.create_user(db, payload.username, payload.password)
    set_session_cookie(response, start_session(db, user))
    return {"success": True, "user": {"username": user.username}}


@router.post("/login")
async def login(payload: CredentialsPayload, response: Response, db: Session = Depends(get_db)) -> dict:
    user = auth.authenticate_user(db, payload.username, payload.password)
    set_session_cookie(response, start_session(db, user))
    logger.info("User %s logged in", user.username)
    return {"success": True, "user": {"username": user.username}}


@router.post("/logout")
async def logout(request: Request, response: Response, db: Session = Depends(get_db)) -> dict:
    end_session(db, session_token(request))
    clear_session_cookie(response)
    return {"success": True}


@router.get("/me")
async def me(identity: Identity = Depends(require_identity)) -> dict:
    return {"user": {"username": identity.username}}

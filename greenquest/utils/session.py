from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from greenquest.config import Config
from greenquest.database.connection import get_db
from greenquest.database.models import User, UserSession
from greenquest.errors import Unauthenticated


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: str


def create_session_token() -> str:
    return secrets.token_urlsafe(32)


def start_session(db: Session, user: User) -> str:
    session = UserSession(
        session_token=create_session_token(),
        user_id=user.id,
        expires_at=datetime.utcnow() + timedelta(hours=Config.SESSION_LIFETIME_HOURS),
    )
    db.add(session)
    db.commit()
    return session.session_token


def end_session(db: Session, token: Optional[str]) -> None:
    if not token:
        return
    db.query(UserSession).filter(UserSession.session_token == token).delete()
    db.commit()


def authenticate(db: Session, token: Optional[str]) -> Optional[Identity]:
    if not token:
        return None
    session = db.query(UserSession).filter(UserSession.session_token == token).first()
    if session is None:
        return None
    if session.expires_at < datetime.utcnow():
        db.delete(session)
        db.commit()
        return None
    user = db.get(User, session.user_id)
    if user is None:
        return None
    return Identity(user_id=user.id, username=user.username)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        Config.SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=Config.COOKIE_SECURE,
        samesite="lax",
        max_age=Config.SESSION_LIFETIME_HOURS * 3600,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(Config.SESSION_COOKIE_NAME)


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(Config.SESSION_COOKIE_NAME)


def require_identity(request: Request, db: Session = Depends(get_db)) -> Identity:
    identity = authenticate(db, session_token(request))
    if identity is None:
        raise Unauthenticated()
    return identity

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from greenquest.database.models import Highscore, User
from greenquest.errors import Conflict, InvalidArgument, NotFound, Unauthenticated

logger = logging.getLogger(__name__)

KNOWN_GAMES = ("sorting", "quiz")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, stored_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
    except ValueError:
        return False


def _require_credentials(username: Optional[str], password: Optional[str]) -> str:
    if not isinstance(username, str) or not isinstance(password, str):
        raise InvalidArgument("Missing username or password")
    username = username.strip()
    if not username or not password:
        raise InvalidArgument("Missing username or password")
    return username


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def create_user(db: Session, username: Optional[str], password: Optional[str]) -> User:
    username = _require_credentials(username, password)
    if get_user_by_username(db, username):
        raise Conflict("Username exists")
    user = User(username=username, password_hash=hash_password(password), coins=0)
    user.highscores = [Highscore(game=game, score=0) for game in KNOWN_GAMES]
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent signup won the unique index
        db.rollback()
        raise Conflict("Username exists")
    db.refresh(user)
    logger.info("Created user %s", username)
    return user


def authenticate_user(db: Session, username: Optional[str], password: Optional[str]) -> User:
    username = _require_credentials(username, password)
    user = get_user_by_username(db, username)
    if user is None:
        raise Unauthenticated("No such user")
    if not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid password")
    return user


def highscores_of(user: User) -> Dict[str, int]:
    scores = {game: 0 for game in KNOWN_GAMES}
    scores.update({row.game: row.score for row in user.highscores})
    return scores


def owned_tags_of(user: User) -> List[str]:
    return [row.tag_id for row in user.owned_tags]


def user_stats(user: User) -> Dict[str, Any]:
    return {"coins": user.coins or 0, "ownedTags": owned_tags_of(user), "highscores": highscores_of(user)}

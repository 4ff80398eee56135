"""Coin economy: score submission rewards and tag purchases.

Both operations are read-modify-write on one user row. The store-level
updates are conditional (``WHERE score < :new`` / ``WHERE coins >= :cost``)
and run inside a per-user lock, so concurrent requests for the same user
are serialized and can never push ``coins`` below zero or lower a highscore.
"""
from __future__ import annotations

import logging
import math
import threading
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from greenquest.database.models import Highscore, OwnedTag, User
from greenquest.errors import AlreadyOwned, InsufficientFunds, InvalidArgument, NotFound
from greenquest.services.auth import KNOWN_GAMES, get_user, highscores_of, owned_tags_of
from greenquest.services.catalog import Catalog
from greenquest.utils.session import Identity

logger = logging.getLogger(__name__)

COINS_PER_POINTS = 10
# largest integer a browser can send exactly
MAX_SCORE = 2 ** 53


class KeyedLock:
    """Hands out one ``threading.Lock`` per key.

    Entries are weak: a key's lock is dropped once nobody holds or waits on it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[Hashable, threading.Lock]" = weakref.WeakValueDictionary()

    def __call__(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)


user_locks = KeyedLock()


@dataclass
class ScoreResult:
    is_new_high: bool
    awarded: int
    highscores: Dict[str, int] = field(default_factory=dict)
    coins: int = 0


@dataclass
class PurchaseResult:
    coins: int
    owned_tags: List[str] = field(default_factory=list)


def award_for(score: int) -> int:
    return score // COINS_PER_POINTS


def validate_score(game: Any, score: Any) -> int:
    if not isinstance(game, str) or not game:
        raise InvalidArgument("Missing game or score")
    if game not in KNOWN_GAMES:
        raise InvalidArgument(f"Unknown game: {game}")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise InvalidArgument("Missing game or score")
    if score > MAX_SCORE:
        raise InvalidArgument("Score out of range")
    if not math.isfinite(score) or score < 0:
        raise InvalidArgument("Score must be a non-negative number")
    return int(math.floor(score))


def _ensure_highscore_row(db: Session, user: User, game: str) -> None:
    exists = db.query(Highscore.id).filter(Highscore.user_id == user.id, Highscore.game == game).first()
    if exists is None:
        db.add(Highscore(user_id=user.id, game=game, score=0))
        db.flush()


def submit_score(db: Session, identity: Identity, game: Any, score: Any) -> ScoreResult:
    score = validate_score(game, score)
    user = get_user(db, identity.user_id)
    with user_locks(user.id):
        _ensure_highscore_row(db, user, game)
        raised = db.execute(
            update(Highscore)
            .where(Highscore.user_id == user.id, Highscore.game == game, Highscore.score < score)
            .values(score=score)
            .execution_options(synchronize_session=False)
        )
        is_new_high = raised.rowcount == 1
        awarded = 0
        if is_new_high:
            awarded = award_for(score)
            db.execute(
                update(User)
                .where(User.id == user.id)
                .values(coins=User.coins + awarded)
                .execution_options(synchronize_session=False)
            )
        db.commit()
    db.refresh(user)
    if is_new_high:
        logger.info("New %s highscore %s for %s, awarded %s coins", game, score, user.username, awarded)
    return ScoreResult(
        is_new_high=is_new_high,
        awarded=awarded,
        highscores=highscores_of(user),
        coins=user.coins,
    )


def purchase_tag(db: Session, identity: Identity, catalog: Catalog, tag_id: Any) -> PurchaseResult:
    if not isinstance(tag_id, str) or not tag_id:
        raise InvalidArgument("Missing tag id")
    item = catalog.get(tag_id)
    if item is None:
        raise NotFound("Tag not found")
    user = get_user(db, identity.user_id)
    with user_locks(user.id):
        owned = db.query(OwnedTag.id).filter(OwnedTag.user_id == user.id, OwnedTag.tag_id == item.id).first()
        if owned is not None:
            db.rollback()
            raise AlreadyOwned()
        debited = db.execute(
            update(User)
            .where(User.id == user.id, User.coins >= item.cost)
            .values(coins=User.coins - item.cost)
            .execution_options(synchronize_session=False)
        )
        if debited.rowcount != 1:
            db.rollback()
            raise InsufficientFunds()
        db.add(OwnedTag(user_id=user.id, tag_id=item.id))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise AlreadyOwned()
    db.refresh(user)
    logger.info("%s bought %s for %s coins", user.username, item.id, item.cost)
    return PurchaseResult(coins=user.coins, owned_tags=owned_tags_of(user))

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from greenquest.database.connection import get_db
from greenquest.schemas import ScorePayload
from greenquest.services import auth, economy
from greenquest.utils.session import Identity, require_identity

router = APIRouter(prefix="/api", tags=["player"])


@router.get("/user-stats")
async def user_stats(identity: Identity = Depends(require_identity), db: Session = Depends(get_db)) -> dict:
    return auth.user_stats(auth.get_user(db, identity.user_id))


@router.post("/score")
async def submit_score(
    payload: ScorePayload,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
) -> dict:
    result = economy.submit_score(db, identity, payload.game, payload.score)
    return {
        "success": True,
        "newHigh": result.is_new_high,
        "awarded": result.awarded,
        "highscores": result.highscores,
        "coins": result.coins,
    }

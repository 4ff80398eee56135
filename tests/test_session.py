from datetime import datetime, timedelta

from greenquest.database.models import UserSession
from greenquest.services import auth
from greenquest.utils.session import Identity, authenticate, end_session, start_session


def test_live_session_resolves_identity(db, player):
    user = auth.get_user(db, player.user_id)
    token = start_session(db, user)
    assert authenticate(db, token) == Identity(user_id=user.id, username="alice")


def test_missing_or_unknown_token(db, player):
    assert authenticate(db, None) is None
    assert authenticate(db, "") is None
    assert authenticate(db, "not-a-session") is None


def test_expired_session_is_rejected_and_removed(db, player):
    token = start_session(db, auth.get_user(db, player.user_id))
    session = db.query(UserSession).filter(UserSession.session_token == token).one()
    session.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    assert authenticate(db, token) is None
    assert db.query(UserSession).filter(UserSession.session_token == token).first() is None


def test_end_session(db, player):
    token = start_session(db, auth.get_user(db, player.user_id))
    end_session(db, token)
    assert authenticate(db, token) is None


def test_passwords_are_hashed(db, player):
    user = auth.get_user(db, player.user_id)
    assert user.password_hash != "s3cret"
    assert auth.verify_password("s3cret", user.password_hash)
    assert not auth.verify_password("wrong", user.password_hash)

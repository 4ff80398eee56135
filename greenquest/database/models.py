from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class User(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("coins >= 0", name="ck_users_coins_non_negative"),)

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    coins = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    highscores = relationship("Highscore", back_populates="user", cascade="all, delete-orphan")
    owned_tags = relationship(
        "OwnedTag", back_populates="user", cascade="all, delete-orphan", order_by="OwnedTag.id"
    )


class Highscore(Base):
    __tablename__ = "highscores"
    __table_args__ = (UniqueConstraint("user_id", "game", name="uq_highscores_user_game"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    game = Column(String, nullable=False)
    score = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="highscores")


class OwnedTag(Base):
    __tablename__ = "owned_tags"
    __table_args__ = (UniqueConstraint("user_id", "tag_id", name="uq_owned_tags_user_tag"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    tag_id = Column(String, nullable=False)
    purchased_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="owned_tags")


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    session_token = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

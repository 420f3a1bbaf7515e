"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    board: Mapped[dict[str, Any]] = mapped_column(JSON)
    current_turn: Mapped[str]
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    notation: Mapped[list[str]] = mapped_column(JSON, default=list)
    positions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    last_move: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    registered_players: Mapped[dict[str, str]] = mapped_column(JSON)
    status: Mapped[str]
    draw_offer_by: Mapped[Optional[str]]
    winner: Mapped[Optional[str]]
    win_reason: Mapped[Optional[str]]
    version: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

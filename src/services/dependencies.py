"""Wiring of the layers: a ChessService backed by the SQL repository."""

from sqlalchemy.orm import Session

from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService


def get_chess_service(db: Session) -> ChessService:
    return ChessService(SQLGameRepository(db))

"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from src.core.exceptions import ConcurrentUpdateError, RepositoryError
from src.core.models import GameModel
from src.db.schema import DBGame, utc_now

_LOGGER = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id, **self._columns(game), version=0)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        _LOGGER.info("Created game %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """
        Add new info to existing record.

        Compare-and-set: only writes when the stored version still equals the version the game was read at.
        Two simultaneous moves can therefore never both be applied to the same (stale) board.
        """
        if not self._fetch_game(game_id):
            return None

        statement = (
            update(DBGame)
            .where(DBGame.id == game_id, DBGame.version == game.version)
            .values(**self._columns(game), version=game.version + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(statement)
        if result.rowcount == 0:
            self.db.rollback()
            raise ConcurrentUpdateError(
                f"Game {game_id} was changed by another request (expected version {game.version})."
            )
        self.db.commit()

        game_db = self._fetch_game(game_id)
        if game_db is None:
            raise RepositoryError(f"Game {game_id} disappeared right after it was updated.")
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def list_games(
        self, player_name: str | None = None, status: str | None = None
    ) -> list[tuple[UUID, GameModel]]:
        """Games (oldest first), optionally only those a player is registered in and/or with a given status."""
        query = select(DBGame).order_by(DBGame.created_at)
        if status is not None:
            query = query.where(DBGame.status == status)
        games = self.db.scalars(query).all()
        # registered_players is a JSON column: match the player name in Python
        return [
            (game_db.id, self._to_model(game_db))
            for game_db in games
            if player_name is None or player_name in game_db.registered_players.values()
        ]

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _columns(self, game: GameModel) -> dict:
        """Everything of the GameModel that gets stored as is (the version is managed here)"""
        return {
            "board": game.board,
            "current_turn": game.current_turn,
            "moves": game.moves,
            "notation": game.notation,
            "positions": game.positions,
            "last_move": game.last_move,
            "registered_players": game.registered_players,
            "status": game.status,
            "draw_offer_by": game.draw_offer_by,
            "winner": game.winner,
            "win_reason": game.win_reason,
        }

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            board=game_db.board,
            current_turn=game_db.current_turn,
            moves=game_db.moves,
            notation=game_db.notation,
            positions=game_db.positions,
            last_move=game_db.last_move,
            registered_players=game_db.registered_players,
            status=game_db.status,
            draw_offer_by=game_db.draw_offer_by,
            winner=game_db.winner,
            win_reason=game_db.win_reason,
            version=game_db.version,
        )

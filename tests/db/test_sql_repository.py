"""Unit tests for src/db/sql_repository.py"""

from dataclasses import replace
from unittest.mock import patch
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from src.chess.game import Game
from src.core.exceptions import ConcurrentUpdateError, RepositoryError
from src.db.sql_repository import GameModel, SQLGameRepository


@pytest.fixture
def new_game_model() -> GameModel:
    """What the domain layer hands over for a freshly created game"""
    return Game.new_game("player_white", "white").to_model()


def test_create_game(db_session_repo: Session, new_game_model: GameModel) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(new_game_model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == new_game_model
    assert record_in_db.version == 0
    assert len(record_in_db.board) == 64


def test_get_game_by_id(db_session_repo: Session, new_game_model: GameModel) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(new_game_model)
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session, new_game_model: GameModel) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(new_game_model)
    assert repo.get_game(uuid4()) is None


def test_update_game(db_session_repo: Session, new_game_model: GameModel) -> None:
    """Update an earlier created record: the whole game state gets replaced and the version goes up."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model)

    game = Game.from_model(new_game_model)
    game.register_player("player_black")
    game.make_move("player_white", "e2", "e4")
    updated = repo.update_game(game_id, game.to_model())

    assert updated is not None
    assert updated.version == 1
    assert updated.status == "active"
    assert updated.notation == ["e4"]
    assert updated.board["e4"] == {"type": "pawn", "color": "white", "has_moved": False}
    assert updated.board["e2"] is None
    assert updated.last_move is not None and updated.last_move["from"] == "e2"
    assert repo.get_game(game_id) == updated


def test_update_unknown_game(db_session_repo: Session, new_game_model: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), new_game_model) is None


def test_consecutive_game_updates(db_session_repo: Session, new_game_model: GameModel) -> None:
    """Each update must start from the latest stored version"""
    repo = SQLGameRepository(db_session_repo)
    stored, game_id = repo.create_game(new_game_model)
    for expected_version in range(1, 4):
        stored = repo.update_game(game_id, stored)
        assert stored is not None
        assert stored.version == expected_version


def test_stale_update_rejected(db_session_repo: Session, new_game_model: GameModel) -> None:
    """Two requests fetched the same version: only the first write wins, the second one is refused"""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model)
    first = repo.get_game(game_id)
    second = repo.get_game(game_id)
    assert first is not None and second is not None

    repo.update_game(game_id, replace(first, notation=["first"]))
    with pytest.raises(ConcurrentUpdateError):
        repo.update_game(game_id, replace(second, notation=["second"]))

    stored = repo.get_game(game_id)
    assert stored is not None
    assert stored.notation == ["first"]
    assert stored.version == 1


def test_delete_game(db_session_repo: Session, new_game_model: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model)
    deleted = repo.delete_game(game_id)
    assert deleted is not None
    assert repo.get_game(game_id) is None
    assert repo.delete_game(game_id) is None


def test_update_game_vanishing_after_commit(db_session_repo: Session, new_game_model: GameModel) -> None:
    """Record deleted between the write and the read-back: reported instead of returning a half answer"""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model)
    stored_record = repo._fetch_game(game_id)

    with patch.object(repo, "_fetch_game", side_effect=[stored_record, None]):
        with pytest.raises(RepositoryError, match="disappeared"):
            repo.update_game(game_id, new_game_model)


@pytest.fixture
def stored_games(db_session_repo: Session) -> dict[str, UUID]:
    """alice: one game waiting, one active against bob, one completed against carol."""
    repo = SQLGameRepository(db_session_repo)

    waiting = Game.new_game("alice", "white")
    active = Game.new_game("alice", "black")
    active.register_player("bob")
    completed = Game.new_game("carol", "white")
    completed.register_player("alice")
    completed.resign("carol")

    return {
        label: repo.create_game(game.to_model())[1]
        for label, game in [("waiting", waiting), ("active", active), ("completed", completed)]
    }


@pytest.mark.parametrize(
    "player_name, status, expected",
    [
        ("alice", None, {"waiting", "active", "completed"}),
        ("alice", "active", {"active"}),
        ("alice", "completed", {"completed"}),
        ("bob", None, {"active"}),
        ("bob", "completed", set()),
        ("carol", "completed", {"completed"}),
        ("dave", None, set()),
        (None, "waiting_for_players", {"waiting"}),
        (None, None, {"waiting", "active", "completed"}),
    ],
)
def test_list_games(
    db_session_repo: Session,
    stored_games: dict[str, UUID],
    player_name: str | None,
    status: str | None,
    expected: set[str],
) -> None:
    repo = SQLGameRepository(db_session_repo)
    found = repo.list_games(player_name=player_name, status=status)
    expected_ids = {stored_games[label] for label in expected}
    assert {game_id for game_id, _ in found} == expected_ids
    assert all(isinstance(model, GameModel) for _, model in found)

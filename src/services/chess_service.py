"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    DrawOfferRequest,
    DrawResponseRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    ListGamesRequest,
    MoveRequest,
    ResignRequest,
)
from src.chess.game import Game
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository

_LOGGER = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """First player requested to create a new game."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        new_game = Game.new_game(player=request.player_name, color=request.color)
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(created_game_data)
        _LOGGER.info("%s created game %s", request.player_name, game_id)

        # Return a GameResponse
        return self._create_game_response(game_id, stored_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game."""

        game = Game.from_model(self._fetch_game(request.game_id))
        game.register_player(request.player_name)
        return self._store(request.game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Retrieve the squares the piece on the requested square can move to."""

        game = Game.from_model(self._fetch_game(request.game_id))
        destinations = game.legal_moves(request.player_name, request.square)
        return LegalMovesResponse(
            game_id=request.game_id,
            player_name=request.player_name,
            square=request.square,
            destinations=destinations,
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""

        # Always rebuilt from the stored record: the move is validated against the current board
        game = Game.from_model(self._fetch_game(request.game_id))

        # Attempt the move
        game.make_move(
            request.player_name,
            request.from_square,
            request.to_square,
            promotion=request.promote_to,
        )

        # store in repository (raises ConcurrentUpdateError if someone else wrote in between)
        return self._store(request.game_id, game)

    def resign(self, request: ResignRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.resign(request.player_name)
        return self._store(request.game_id, game)

    def offer_draw(self, request: DrawOfferRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.offer_draw(request.player_name)
        return self._store(request.game_id, game)

    def respond_to_draw(self, request: DrawResponseRequest) -> GameResponse:
        """Opponent accepts (game ends in a draw) or declines (game goes on) a pending offer."""
        game = Game.from_model(self._fetch_game(request.game_id))
        if request.accept:
            game.accept_draw(request.player_name)
        else:
            game.decline_draw(request.player_name)
        return self._store(request.game_id, game)

    def list_games(self, request: ListGamesRequest) -> list[GameResponse]:
        """Games a player takes part in, e.g. only the active ones to resume or the completed ones as history."""
        status = request.status.value if request.status else None
        games = self.repo.list_games(player_name=request.player_name, status=status)
        return [self._create_game_response(game_id, model) for game_id, model in games]

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        deleted = self.repo.delete_game(request.game_id)
        if deleted is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        _LOGGER.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _store(self, game_id: UUID, game: Game) -> GameResponse:
        """Capture updated state in a GameModel, persist it and answer with the stored state."""
        updated = self.repo.update_game(game_id, game.to_model())
        if updated is None:
            raise RepositoryError(f"Game with {game_id=} disappeared before it could be updated.")
        return self._create_game_response(game_id, updated)

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            players=model.registered_players,
            board=model.board,
            current_turn=model.current_turn,
            notation=model.notation,
            status=model.status,
            draw_offer_by=model.draw_offer_by,
            winner=model.winner,
            win_reason=model.win_reason,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

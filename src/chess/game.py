"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.

NOTE: A Game is rebuilt from the stored model for every request. Legality is therefore always checked against the
freshly fetched board, never against moves computed for an older one.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Self

from src.chess.applicator import apply_move
from src.chess.board import Board
from src.chess.en_passant import en_passant_target
from src.chess.moves import Move
from src.chess.notation import move_to_algebraic
from src.chess.outcome import Outcome, OutcomeReason, Winner, evaluate_outcome
from src.chess.pieces import Color
from src.chess.position import PositionSnapshot
from src.chess.promotion import PromotionChoice
from src.chess.rules import legal_destinations
from src.chess.square import Square, is_valid_square_name
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidRequestError,
    NotYourTurnError,
)
from src.core.models import GameModel

_LOGGER = logging.getLogger(__name__)

AVAILABLE_COLOR_NAMES = [color.name for color in Color]


class Status(Enum):
    WAITING_FOR_PLAYERS = auto()
    ACTIVE = auto()
    COMPLETED = auto()


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    current_turn: Color
    moves: list[Move]
    notation: list[str]
    positions: list[PositionSnapshot]
    players: dict[Color, str]
    status: Status
    draw_offer_by: Optional[Color] = None
    outcome: Optional[Outcome] = None
    version: int = 0

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        status_name = model.status.replace(" ", "_").upper()
        if status_name not in Status.__members__:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.name.lower() for status in Status])}"
            )
        if model.current_turn.upper() not in AVAILABLE_COLOR_NAMES:
            raise GameStateError(f"Invalid color to move: {model.current_turn!r}")

        outcome = (
            Outcome(Winner(model.winner), OutcomeReason(model.win_reason))
            if model.winner and model.win_reason
            else None
        )
        return cls(
            board=Board.from_records(model.board),
            current_turn=Color[model.current_turn.upper()],
            moves=[Move.from_record(record) for record in model.moves],
            notation=list(model.notation),
            positions=[PositionSnapshot.from_record(record) for record in model.positions],
            players={
                Color[color_name.upper()]: player
                for color_name, player in model.registered_players.items()
            },
            status=Status[status_name],
            draw_offer_by=Color[model.draw_offer_by.upper()] if model.draw_offer_by else None,
            outcome=outcome,
            version=model.version,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            board=self.board.to_records(),
            current_turn=self.current_turn.value,
            moves=[move.to_record() for move in self.moves],
            notation=list(self.notation),
            positions=[snapshot.to_record() for snapshot in self.positions],
            last_move=self.last_move.to_record() if self.last_move else None,
            registered_players={color.value: name for color, name in self.players.items()},
            status=self.status.name.lower(),
            draw_offer_by=self.draw_offer_by.value if self.draw_offer_by else None,
            winner=self.outcome.winner.value if self.outcome else None,
            win_reason=self.outcome.reason.value if self.outcome else None,
            version=self.version,
        )

    @classmethod
    def new_game(cls, player: str, color: str) -> Self:
        """To start a new game with the player using the pieces with the indicated color."""
        if color.upper() not in AVAILABLE_COLOR_NAMES:
            raise GameStateError(
                f"Cannot create new game. Color {color} not in {','.join([c.lower() for c in AVAILABLE_COLOR_NAMES])}."
            )
        player_color = Color[color.upper()]
        return cls(
            board=Board.starting_position(),
            current_turn=Color.WHITE,
            moves=[],
            notation=[],
            positions=[],
            players={player_color: player},
            status=Status.WAITING_FOR_PLAYERS,
        )

    @property
    def last_move(self) -> Optional[Move]:
        return self.moves[-1] if self.moves else None

    @property
    def winner(self) -> Optional[str]:
        """Name of the winning player. None while the game goes on, or when it ended in a draw."""
        if self.outcome is None or self.outcome.winner == Winner.DRAW:
            return None
        return self.players.get(Color(self.outcome.winner.value))

    def register_player(self, player: str) -> None:
        """Registering the 2nd player to an open game"""
        if self.status != Status.WAITING_FOR_PLAYERS:
            raise GameStateError(
                f"Cannot join this game. Game is not accepting new players. status: {self.status}"
            )
        if player in self.players.values():
            raise GameStateError(f"Player {player} already plays in this game.")

        opponent_color = list(self.players.keys())[0]
        self.players[opponent_color.opponent] = player
        self._change_status(Status.ACTIVE)
        _LOGGER.info("Player %s joined with %s, game started", player, opponent_color.opponent.value)

    def legal_moves(self, player: str, square_name: str) -> list[str]:
        """
        Service will request the legal destinations of the piece on a selected square.
        ----

        1. Check if it is your turn
        2. Yes? Generate legal destinations for that piece (empty if it is not yours)
        """
        self._assert_in_progress()
        self._assert_your_turn(player)

        square = self._parse_square(square_name)
        piece = self.board.piece(square)
        if piece is None or piece.color != self.current_turn:
            return []
        destinations = legal_destinations(self.board, square, piece, self.last_move)
        return sorted(destination.to_algebraic() for destination in destinations)

    def make_move(
        self,
        player: str,
        from_square_name: str,
        to_square_name: str,
        promotion: PromotionChoice = None,
    ) -> Move:
        """
        Attempt to make a move
        -----

        1. check the move is legal on the current board
        2. update the board (castling / en passant / promotion handled by the applicator)
        3. update the history of moves, notation, and positions
        4. switch turns, drop any pending draw offer
        5. update game status (if the game has ended)
        """
        self._assert_in_progress()
        self._assert_your_turn(player)

        from_square = self._parse_square(from_square_name)
        to_square = self._parse_square(to_square_name)
        piece = self.board.piece(from_square)
        if piece is None or piece.color != self.current_turn:
            raise IllegalMoveError(f"No piece of yours on {from_square_name}")

        legal = legal_destinations(self.board, from_square, piece, self.last_move)
        if to_square not in legal:
            _LOGGER.debug(
                "Rejected %s%s, legal: %s",
                from_square_name,
                to_square_name,
                sorted(square.to_algebraic() for square in legal),
            )
            raise IllegalMoveError(f"Move not allowed: {from_square_name}{to_square_name}")

        board_before, previous_move = self.board, self.last_move
        self.board, move = apply_move(
            board_before, from_square, to_square, previous_move, promotion
        )
        self.moves.append(move)
        self.notation.append(move_to_algebraic(move, board_before, previous_move))
        self.current_turn = self.current_turn.opponent
        self.positions.append(
            PositionSnapshot(self.board, en_passant_target(move), self.current_turn)
        )
        self.draw_offer_by = None
        _LOGGER.info("%s played %s", player, self.notation[-1])

        self._update_game_status()
        return move

    def resign(self, player: str) -> None:
        """The opponent wins"""
        self._assert_in_progress()
        player_color = self._get_player_color(player)
        self._finish(Outcome(Winner.from_color(player_color.opponent), OutcomeReason.RESIGNATION))

    def offer_draw(self, player: str) -> None:
        """Either player can offer a draw, at any time during the game. Making a move withdraws it."""
        self._assert_in_progress()
        player_color = self._get_player_color(player)
        if self.draw_offer_by is not None:
            raise GameStateError(f"A draw offer by {self.draw_offer_by.value} is already pending.")
        self.draw_offer_by = player_color

    def accept_draw(self, player: str) -> None:
        self._assert_draw_offered_to(player)
        self._finish(Outcome(Winner.DRAW, OutcomeReason.AGREEMENT))

    def decline_draw(self, player: str) -> None:
        self._assert_draw_offered_to(player)
        self.draw_offer_by = None

    # -- PRIVATE HELPERS ---
    def _get_player_color(self, player: str) -> Color:
        for color, name in self.players.items():
            if name == player:
                return color
        raise GameStateError(f"Player {player} does not play in this game.")

    def _assert_in_progress(self) -> None:
        # make sure the game is (still) in progress
        if self.status != Status.ACTIVE:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

    def _assert_your_turn(self, player: str) -> None:
        """You must wait for your turn before calculating legal moves / making a move."""
        player_to_move = self.players[self.current_turn]
        if player != player_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {player_to_move} to make a move first."
            )

    def _assert_draw_offered_to(self, player: str) -> None:
        """Only the opponent of whoever offered the draw can answer it."""
        self._assert_in_progress()
        player_color = self._get_player_color(player)
        if self.draw_offer_by != player_color.opponent:
            raise GameStateError("There is no draw offer for you to answer.")

    def _parse_square(self, square_name: str) -> Square:
        if not is_valid_square_name(square_name):
            raise InvalidRequestError(f"Cannot interpret {square_name!r} as a square.")
        return Square.from_algebraic(square_name)

    def _update_game_status(self) -> None:
        """Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been switched. At this point the turn player is the opponent of the player that moved.
        """
        outcome = evaluate_outcome(
            self.board, self.current_turn, self.last_move, self.moves, self.positions
        )
        if outcome is not None:
            self._finish(outcome)

    def _finish(self, outcome: Outcome) -> None:
        self.outcome = outcome
        self.draw_offer_by = None
        self._change_status(Status.COMPLETED)
        _LOGGER.info("Game over: %s (%s)", outcome.winner.value, outcome.reason.value)

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status

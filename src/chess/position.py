"""
Representation of a single position reached during the game. The part that decides whether two positions are 'the same'
(for the threefold repetition rule).
"""

from dataclasses import dataclass
from typing import Any, Optional, Self

from src.chess.board import Board
from src.chess.pieces import TRACKS_HAS_MOVED, Color
from src.chess.square import Square

PositionRecord = dict[str, Any]
PositionKey = tuple[Any, ...]


@dataclass(frozen=True)
class PositionSnapshot:
    """
    Board after a move, together with the state that is not visible on the board itself.
    ----

    * The en passant target: the square a pawn just skipped by pushing two squares (or None).
      Two otherwise equal boards are different positions when only one of them allows an en passant capture.
    * The color to move.
    * Castling eligibility is part of the board already: rooks and kings carry their has_moved flags.
    """

    board: Board
    en_passant_target: Optional[Square]
    color_to_move: Color

    def key(self) -> PositionKey:
        """
        Only the position-defining state: occupancy, the castling relevant has_moved flags, en passant target, turn.

        NOTE: anything that only describes how the position got reached (the move record) is left out.
        """
        occupancy = tuple(
            None
            if piece is None
            else (
                piece.type,
                piece.color,
                piece.has_moved if piece.type in TRACKS_HAS_MOVED else False,
            )
            for piece in self.board.squares
        )
        return occupancy, self.en_passant_target, self.color_to_move

    def to_record(self) -> PositionRecord:
        return {
            "board": self.board.to_records(),
            "en_passant_target": (
                self.en_passant_target.to_algebraic()
                if self.en_passant_target is not None
                else None
            ),
            "color_to_move": self.color_to_move.value,
        }

    @classmethod
    def from_record(cls, record: PositionRecord) -> Self:
        target = record.get("en_passant_target")
        return cls(
            board=Board.from_records(record["board"]),
            en_passant_target=Square.from_algebraic(target) if target else None,
            color_to_move=Color(record["color_to_move"]),
        )

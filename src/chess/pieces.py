"""Defines the types of chess pieces"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Self


class PieceType(Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Color(Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Only these two piece types care about having moved (castling eligibility)
TRACKS_HAS_MOVED: frozenset[PieceType] = frozenset({PieceType.ROOK, PieceType.KING})

PieceRecord = dict[str, Any]


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def moved(self) -> Self:
        """Copy with the has_moved flag set (once set, never reset). Only rooks and kings track it."""
        if self.type not in TRACKS_HAS_MOVED or self.has_moved:
            return self
        return replace(self, has_moved=True)

    def promote_to(self, new_type: PieceType) -> Self:
        return replace(self, type=new_type)

    def to_record(self) -> PieceRecord:
        return {
            "type": self.type.value,
            "color": self.color.value,
            "has_moved": self.has_moved,
        }

    @classmethod
    def from_record(cls, record: PieceRecord) -> Self:
        return cls(
            type=PieceType(record["type"]),
            color=Color(record["color"]),
            has_moved=bool(record.get("has_moved", False)),
        )

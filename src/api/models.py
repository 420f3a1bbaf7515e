"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.square import is_valid_square_name
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Status, Winner

PieceColor = str
PlayerName = str
SquareName = str


def _validate_square_name(value: str) -> str:
    if not is_valid_square_name(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_name: str
    color: Color


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_name: str


class LegalMovesRequest(BaseModel):
    game_id: UUID
    player_name: str
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    player_name: str
    from_square: SquareName
    to_square: SquareName
    # Free text: an unknown choice is promoted to a queen, the move is not rejected
    promote_to: Optional[str] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class ResignRequest(BaseModel):
    game_id: UUID
    player_name: str


class DrawOfferRequest(BaseModel):
    game_id: UUID
    player_name: str


class DrawResponseRequest(BaseModel):
    game_id: UUID
    player_name: str
    accept: bool


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class ListGamesRequest(BaseModel):
    """Without a player name: games of everybody, without a status: games in any state."""

    player_name: Optional[str] = None
    status: Optional[Status] = None


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    players: dict[PieceColor, PlayerName]
    board: dict[SquareName, Optional[dict]]
    current_turn: Color
    notation: list[str]
    status: Status
    draw_offer_by: Optional[Color] = None
    winner: Optional[Winner] = None
    win_reason: Optional[str] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_name: str
    square: SquareName
    destinations: list[SquareName]

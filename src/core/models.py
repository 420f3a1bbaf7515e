"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str
SquareName = str
Record = dict[str, Any]


@dataclass
class GameModel:
    """
    Transport-safe representation of a chess game used between API, Service, DB, and Game layers.

    Only JSON-friendly values: boards are mappings square name -> piece record (or None),
    moves and positions are lists of plain records.
    """

    board: dict[SquareName, Optional[Record]]
    current_turn: PieceColor
    moves: list[Record]
    notation: list[str]
    positions: list[Record]
    last_move: Optional[Record]
    registered_players: dict[PieceColor, PlayerName]
    status: str
    draw_offer_by: Optional[PieceColor] = None
    winner: Optional[str] = None
    win_reason: Optional[str] = None
    # Incremented by the repository on every write: protects against applying a move to a stale board
    version: int = field(default=0)

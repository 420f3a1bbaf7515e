"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING_FOR_PLAYERS = "waiting_for_players"
    ACTIVE = "active"
    COMPLETED = "completed"


# --- Color mirrors the domain enum in src/chess/pieces.py.
# --- NOTE The values are identical, so converting between layers is a lookup by value: Color(domain_color.value)


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class Winner(StrEnum):
    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"

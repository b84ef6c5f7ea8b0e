from __future__ import annotations

from enum import Enum


class BoardType(str, Enum):
    """Bingo board flavours.

    Only standard boards award pattern bonuses; progression boards unlock tiles
    tier by tier and never score rows, columns or diagonals.
    """

    STANDARD = "standard"
    PROGRESSION = "progression"

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from core.enums.board_type import BoardType
from core.errors import BoardLayoutError


class Tile(BaseModel):
    """One cell of a bingo board, addressed by its zero-based linear index."""

    id: str
    board_id: str
    index: int = Field(..., ge=0, description="Linear index, row = index // columns")
    weight: int = Field(default=0, ge=0, description="Experience awarded when the tile is approved")
    title: str | None = None

    model_config = {
        "frozen": True,
    }


class PatternBonusConfig(BaseModel):
    """Bonus experience attached to the patterns of one board.

    A bonus of zero (or an absent row/column entry) means the pattern is not
    configured and never contributes to totals or to the possible maximum.
    """

    row_bonuses: dict[int, int] = Field(default_factory=dict, description="Row index -> bonus XP")
    column_bonuses: dict[int, int] = Field(default_factory=dict, description="Column index -> bonus XP")
    main_diagonal_bonus: int = Field(default=0, ge=0)
    anti_diagonal_bonus: int = Field(default=0, ge=0)
    complete_board_bonus: int = Field(default=0, ge=0)

    model_config = {
        "frozen": True,
    }

    @field_validator("row_bonuses", "column_bonuses")
    @classmethod
    def _no_negative_bonuses(cls, value: dict[int, int]) -> dict[int, int]:
        for index, bonus in value.items():
            if bonus < 0:
                msg = f"Bonus for index {index} must be non-negative, got {bonus}"
                raise ValueError(msg)
        return value

    def row_bonus(self, row: int) -> int:
        return self.row_bonuses.get(row, 0)

    def column_bonus(self, column: int) -> int:
        return self.column_bonuses.get(column, 0)


class Board(BaseModel):
    """A ``rows x columns`` grid of tiles with its pattern bonus configuration."""

    id: str
    title: str = ""
    rows: int = Field(..., ge=1)
    columns: int = Field(..., ge=1)
    board_type: BoardType = BoardType.STANDARD
    tiles: list[Tile] = Field(default_factory=list)
    bonuses: PatternBonusConfig = Field(default_factory=PatternBonusConfig)

    model_config = {
        "frozen": True,
    }

    @property
    def is_square(self) -> bool:
        return self.rows == self.columns

    @property
    def declared_tile_count(self) -> int:
        return self.rows * self.columns

    def tiles_by_index(self) -> dict[int, Tile]:
        return {tile.index: tile for tile in self.tiles}

    def tile_at(self, index: int) -> Tile | None:
        return self.tiles_by_index().get(index)

    def validate_layout(self) -> None:
        """Check that the tiles exactly fill the declared grid.

        Raises:
            BoardLayoutError: If the tile count does not match ``rows * columns``,
                or an index is duplicated or outside the grid.
        """
        if len(self.tiles) != self.declared_tile_count:
            msg = (
                f"Board {self.id} declares {self.rows}x{self.columns} "
                f"({self.declared_tile_count} tiles) but has {len(self.tiles)}"
            )
            raise BoardLayoutError(msg)

        seen: set[int] = set()
        for tile in self.tiles:
            if tile.index >= self.declared_tile_count:
                msg = f"Tile {tile.id} has index {tile.index} outside board {self.id}"
                raise BoardLayoutError(msg)
            if tile.index in seen:
                msg = f"Board {self.id} has more than one tile at index {tile.index}"
                raise BoardLayoutError(msg)
            seen.add(tile.index)

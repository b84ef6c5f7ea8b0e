"""Tile index sets for the rows, columns and diagonals of a rectangular board.

Tiles are addressed by a zero-based linear index where ``row = index // columns``
and ``col = index % columns``.
"""

from __future__ import annotations


def tile_position(index: int, columns: int) -> tuple[int, int]:
    """Return the ``(row, col)`` of a linear tile index."""
    return index // columns, index % columns


def row_indices(row: int, columns: int, total_tiles: int) -> list[int]:
    """Get all tile indices for a row, clipped to the tiles that exist.

    Args:
        row: Zero-based row number
        columns: Number of columns on the board
        total_tiles: Number of tiles actually present on the board

    Returns:
        Indices of the row, possibly shorter than ``columns`` (or empty) when the
        grid is short its final row
    """
    start = row * columns
    end = min(start + columns, total_tiles)
    return list(range(start, end))


def column_indices(col: int, rows: int, columns: int) -> list[int]:
    return [row * columns + col for row in range(rows)]


def main_diagonal_indices(size: int) -> list[int]:
    """Top-left to bottom-right diagonal of a square board."""
    return [i * size + i for i in range(size)]


def anti_diagonal_indices(size: int) -> list[int]:
    """Top-right to bottom-left diagonal of a square board."""
    return [i * size + (size - 1 - i) for i in range(size)]


def diagonal_indices_for(rows: int, columns: int) -> tuple[list[int], list[int]] | None:
    """Return ``(main, anti)`` diagonals, or None when the board is not square.

    None means the diagonal patterns do not apply to the board at all, which is
    different from a diagonal with no tiles on it.
    """
    if rows != columns:
        return None
    return main_diagonal_indices(rows), anti_diagonal_indices(rows)


def all_indices(rows: int, columns: int) -> list[int]:
    return list(range(rows * columns))

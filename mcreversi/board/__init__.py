"""
盤面モジュール

正規化盤面 (Board) と実際の色の局面 (GamePosition) を提供
"""

from .board import (
    BOARD_CELLS,
    BOARD_SIZE,
    INITIAL_LAYOUT,
    PASS,
    Board,
    Cell,
    Color,
    GamePosition,
    action_to_xy,
    xy_to_action,
)
from .notation import format_move, parse_move, render_board, render_position

__all__ = [
    "BOARD_CELLS",
    "BOARD_SIZE",
    "INITIAL_LAYOUT",
    "PASS",
    "Board",
    "Cell",
    "Color",
    "GamePosition",
    "action_to_xy",
    "xy_to_action",
    "format_move",
    "parse_move",
    "render_board",
    "render_position",
]

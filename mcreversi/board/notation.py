"""
棋譜表記と盤面のテキスト表示

着手は列の英字と行の数字の2文字で表す（例: "f5" は x=5, y=4）。
"""

from typing import Optional, Tuple

from .board import BOARD_SIZE, Board, Cell, GamePosition

COLUMNS = "abcdefgh"
ROWS = "12345678"

_CELL_GLYPHS = {Cell.BLACK: "X", Cell.WHITE: "O", Cell.EMPTY: "."}


def parse_move(text: str) -> Optional[Tuple[int, int]]:
    """
    "f5" 形式の文字列を座標に変換

    Args:
        text: 列の英字 + 行の数字

    Returns:
        (x, y)。解釈できない場合は None
    """
    text = text.strip().lower()
    if len(text) != 2:
        return None
    col, row = text[0], text[1]
    # 行番号は ASCII の 1-8 のみ
    if col not in COLUMNS or row not in ROWS:
        return None
    return COLUMNS.index(col), ROWS.index(row)


def format_move(x: int, y: int) -> str:
    """座標を "f5" 形式に変換"""
    return f"{COLUMNS[x]}{y + 1}"


def render_board(board: Board) -> str:
    """
    盤面を文字列で描画

    例:
          abcdefgh
         +--------
        1|........
    """
    lines = ["  " + COLUMNS[:BOARD_SIZE], " +" + "-" * BOARD_SIZE]
    for y in range(BOARD_SIZE):
        row = "".join(_CELL_GLYPHS[board.at(x, y)] for x in range(BOARD_SIZE))
        lines.append(f"{y + 1}|{row}")
    return "\n".join(lines)


def render_position(position: GamePosition) -> str:
    """実際の色で盤面を描画"""
    return render_board(position.board)

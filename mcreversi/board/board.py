"""
オセロ盤面

8x8盤面の表現と着手生成を提供する。

盤面は2種類:
- Board: 正規化盤面。手番側が常に黒 (X) として表現される
- GamePosition: 絶対盤面。実際の色と手番を保持する（表示・入力用）

Board上の着手生成は「黒番」だけを考えればよい。着手後の局面は
色を反転して返すので、後続局面でも黒が次の手番となる。
"""

from enum import Enum, IntEnum
from typing import List, Optional, Tuple

BOARD_SIZE = 8
BOARD_CELLS = BOARD_SIZE * BOARD_SIZE
PASS = BOARD_CELLS  # パスアクション

INITIAL_LAYOUT = (
    "........"
    "........"
    "........"
    "...OX..."
    "...XO..."
    "........"
    "........"
    "........"
)

DIRECTIONS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


class Cell(IntEnum):
    """マスの状態 (0=空, 1=黒, -1=白)"""
    EMPTY = 0
    BLACK = 1
    WHITE = -1


class Color(Enum):
    """プレイヤーの色"""
    BLACK = 1
    WHITE = -1

    @property
    def opponent(self) -> "Color":
        return Color.WHITE if self is Color.BLACK else Color.BLACK


_CHAR_TO_CELL = {"X": Cell.BLACK, "O": Cell.WHITE, ".": Cell.EMPTY}
_CELL_TO_CHAR = {Cell.BLACK: "X", Cell.WHITE: "O", Cell.EMPTY: "."}

# 内部ループ用の int 値
_EMPTY, _BLACK, _WHITE = int(Cell.EMPTY), int(Cell.BLACK), int(Cell.WHITE)


def _build_rays() -> List[List[List[int]]]:
    """各マスから8方向へ伸びるインデックス列を事前計算"""
    rays = []
    for index in range(BOARD_CELLS):
        x, y = index % BOARD_SIZE, index // BOARD_SIZE
        cell_rays = []
        for dx, dy in DIRECTIONS:
            ray = []
            nx, ny = x + dx, y + dy
            while 0 <= nx < BOARD_SIZE and 0 <= ny < BOARD_SIZE:
                ray.append(nx + ny * BOARD_SIZE)
                nx += dx
                ny += dy
            if len(ray) >= 2:
                cell_rays.append(ray)
        rays.append(cell_rays)
    return rays


# 長さ1以下の方向は挟めないので除外済み
_RAYS = _build_rays()


def is_in_bounds(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


class Board:
    """
    正規化されたオセロ盤面

    64マスを行優先で保持する。手番側は常に黒として表現される。
    値型として扱い、局面を変えたいときは copy() してから変更する。
    """

    __slots__ = ("cells",)

    def __init__(self, layout: str = INITIAL_LAYOUT):
        """
        Args:
            layout: 64文字の盤面文字列 ('X'=黒, 'O'=白, '.'=空, 行優先)

        Raises:
            ValueError: 64文字でない、または未知の文字を含む場合
        """
        if len(layout) != BOARD_CELLS:
            raise ValueError(
                f"Board layout must have {BOARD_CELLS} cells, got {len(layout)}"
            )
        cells = []
        for i, char in enumerate(layout):
            cell = _CHAR_TO_CELL.get(char.upper())
            if cell is None:
                raise ValueError(f"Unknown cell character {char!r} at index {i}")
            cells.append(int(cell))
        self.cells: List[int] = cells

    def copy(self) -> "Board":
        board = Board.__new__(Board)
        board.cells = self.cells[:]
        return board

    def at(self, x: int, y: int) -> Cell:
        """
        (x, y) のマスの状態を取得

        Raises:
            IndexError: 盤外の座標
        """
        if not is_in_bounds(x, y):
            raise IndexError(f"Coordinate out of range: ({x}, {y})")
        return Cell(self.cells[x + y * BOARD_SIZE])

    def is_filled(self) -> bool:
        """空きマスが残っていないか"""
        return Cell.EMPTY not in self.cells

    def get_stone_counts(self) -> Tuple[int, int]:
        """
        石数を取得

        Returns:
            (黒の石数, 白の石数)
        """
        black = self.cells.count(Cell.BLACK)
        white = self.cells.count(Cell.WHITE)
        return black, white

    def black_occupation(self) -> float:
        """盤面全体に占める黒石の割合 (0.0-1.0)"""
        return self.cells.count(Cell.BLACK) / BOARD_CELLS

    def flip_colors(self) -> None:
        """黒白を入れ替える（空マスはそのまま）。2回適用すると元に戻る"""
        self.cells = [-c for c in self.cells]

    def flipped(self) -> "Board":
        """色を入れ替えた盤面のコピーを返す"""
        board = Board.__new__(Board)
        board.cells = [-c for c in self.cells]
        return board

    def _captures(self, index: int) -> List[int]:
        """index に黒を置いたときに反転する白石のインデックス"""
        cells = self.cells
        flips = []
        for ray in _RAYS[index]:
            run = 0
            for target in ray:
                state = cells[target]
                if state == _WHITE:
                    run += 1
                    continue
                if state == _BLACK and run > 0:
                    flips.extend(ray[:run])
                break
        return flips

    def try_place(self, x: int, y: int) -> bool:
        """
        (x, y) に黒石を置く

        8方向それぞれについて、連続する白石の列が黒石で終わっていれば
        その列を黒に反転する。1方向も挟めない場合は盤面を変更しない。

        Args:
            x: 列 (0-7)
            y: 行 (0-7)

        Returns:
            bool: 合法手だったか
        """
        if not is_in_bounds(x, y):
            return False
        index = x + y * BOARD_SIZE
        if self.cells[index] != _EMPTY:
            return False

        flips = self._captures(index)
        if not flips:
            return False

        self.cells[index] = _BLACK
        for target in flips:
            self.cells[target] = _BLACK
        return True

    def legal_moves(self) -> List[Tuple[int, int]]:
        """合法手 (x, y) のリスト（行優先順）"""
        cells = self.cells
        moves = []
        for index in range(BOARD_CELLS):
            if cells[index] == _EMPTY and self._captures(index):
                moves.append((index % BOARD_SIZE, index // BOARD_SIZE))
        return moves

    def legal_successors(self) -> List["Board"]:
        """
        全合法手の着手後局面を生成

        各局面は色反転済みで、黒が次の手番を表す。
        順序は legal_moves() と一致する。

        Returns:
            List[Board]: 後続局面（合法手がなければ空リスト）
        """
        successors = []
        for x, y in self.legal_moves():
            board = self.copy()
            board.try_place(x, y)
            board.flip_colors()
            successors.append(board)
        return successors

    def to_layout(self) -> str:
        """64文字の盤面文字列に変換"""
        return "".join(_CELL_TO_CHAR[Cell(c)] for c in self.cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self) -> str:
        return f"Board({self.to_layout()!r})"


def action_to_xy(action: int) -> Tuple[int, int]:
    """アクション (0-63) を座標 (x, y) に変換"""
    return action % BOARD_SIZE, action // BOARD_SIZE


def xy_to_action(x: int, y: int) -> int:
    """座標 (x, y) をアクション (0-63) に変換"""
    return x + y * BOARD_SIZE


class GamePosition:
    """
    実際の色で表した局面

    Board は手番側を黒として正規化されているため、表示や人間の入力には
    使えない。GamePosition は実際の色の盤面と手番を保持し、
    canonical() / from_canonical() で Board と相互変換する。
    """

    def __init__(
        self,
        board: Optional[Board] = None,
        to_move: Color = Color.BLACK,
        move_count: int = 0,
    ):
        """
        Args:
            board: 実際の色の盤面（省略時は初期配置）
            to_move: 手番の色
            move_count: これまでの手数（パスを含む）
        """
        self.board = board if board is not None else Board()
        self.to_move = to_move
        self.move_count = move_count

    @classmethod
    def initial(cls) -> "GamePosition":
        return cls(Board(INITIAL_LAYOUT), Color.BLACK, 0)

    @classmethod
    def from_canonical(
        cls, board: Board, to_move: Color, move_count: int = 0
    ) -> "GamePosition":
        """
        正規化盤面から局面を作成

        Args:
            board: 手番側が黒の盤面
            to_move: 実際の手番の色
            move_count: 手数
        """
        absolute = board.flipped() if to_move is Color.WHITE else board.copy()
        return cls(absolute, to_move, move_count)

    def canonical(self) -> Board:
        """手番側が黒になるよう正規化した盤面を返す"""
        if self.to_move is Color.WHITE:
            return self.board.flipped()
        return self.board.copy()

    def copy(self) -> "GamePosition":
        return GamePosition(self.board.copy(), self.to_move, self.move_count)

    def get_legal_moves(self) -> List[int]:
        """
        合法手のリスト

        Returns:
            List[int]: アクション (0-63)。合法手がなければ空リスト
        """
        return [xy_to_action(x, y) for x, y in self.canonical().legal_moves()]

    def make_move(self, action: int) -> bool:
        """
        着手する（PASS=64 でパス）

        パスは合法手がない場合のみ受け付ける。

        Returns:
            bool: 着手が成功したか
        """
        canonical = self.canonical()
        if action == PASS:
            if canonical.legal_moves():
                return False
        else:
            if not 0 <= action < BOARD_CELLS:
                return False
            if not canonical.try_place(*action_to_xy(action)):
                return False

        # 着手後の正規化盤面は相手番が黒
        canonical.flip_colors()
        moved = GamePosition.from_canonical(
            canonical, self.to_move.opponent, self.move_count + 1
        )
        self.board, self.to_move, self.move_count = moved.board, moved.to_move, moved.move_count
        return True

    def is_terminal(self) -> bool:
        """盤面が埋まったか、両者とも着手できない"""
        if self.board.is_filled():
            return True
        canonical = self.canonical()
        if canonical.legal_moves():
            return False
        return not canonical.flipped().legal_moves()

    def get_stone_counts(self) -> Tuple[int, int]:
        """(黒の石数, 白の石数)"""
        return self.board.get_stone_counts()

    def get_winner(self) -> int:
        """
        勝者を判定

        Returns:
            int: 1=黒勝ち, -1=白勝ち, 0=引き分け
        """
        black, white = self.get_stone_counts()
        if black > white:
            return 1
        if white > black:
            return -1
        return 0

    def __repr__(self) -> str:
        return (f"GamePosition(to_move={self.to_move.name}, "
                f"move_count={self.move_count}, "
                f"board={self.board.to_layout()!r})")

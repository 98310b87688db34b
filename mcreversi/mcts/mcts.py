"""
モンテカルロ木探索 (Monte Carlo Tree Search)

ランダムプレイアウトによるUCT探索:
- UCB1式による選択
- 1回訪問してからの遅延展開
- ランダムプレイアウトによる評価
- 手番ごとに値を反転しながら逆伝播

探索は制限時間に達するまで繰り返し、最も訪問回数の多い子を選ぶ。
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from mcreversi.board import Board, Color
from .node import EXPLORATION_CONST, MIN_VISITS_TO_EXPAND, SearchTree
from .random_source import RandomSource, get_default_random_source


@dataclass
class SearchResult:
    """
    探索結果

    Attributes:
        board: 選んだ着手後の正規化盤面（黒が相手番）
        num_games: ルートの訪問回数（探索しなかった場合は 0）
        expected_occupation: 手番側の最終占有率の期待値（探索しなかった場合は None）
        elapsed: 探索にかかった時間（秒）
    """
    board: Board
    num_games: int = 0
    expected_occupation: Optional[float] = None
    elapsed: float = 0.0

    def summary(self) -> str:
        """探索統計の1行表示"""
        return f"#games: {self.num_games}, occupation: {self.expected_occupation}"


class MCTS:
    """
    モンテカルロ木探索

    1回の反復:
    1. Select: リーフに到達するまでUCB1値が最大の子を辿る
    2. Playout: リーフからランダムに終局まで進め、結果を逆伝播
    3. Expand: 訪問済みのリーフを展開

    木は探索ごとに作り直し、手番をまたいで再利用しない。
    """

    def __init__(
        self,
        exploration_const: float = EXPLORATION_CONST,
        min_visits_to_expand: int = MIN_VISITS_TO_EXPAND,
        random_source: Optional[RandomSource] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        """
        Args:
            exploration_const: UCB1の探索定数（大きいほど探索重視）
            min_visits_to_expand: ノードを展開するのに必要な訪問回数
            random_source: プレイアウト用の乱数源（省略時はプロセス共通）
            timer: 経過時間の計測に使う時計
        """
        self.exploration_const = exploration_const
        self.min_visits_to_expand = min_visits_to_expand
        if random_source is None:
            random_source = get_default_random_source()
        self.random_source = random_source
        self.timer = timer

    def search(self, board: Board, time_budget: float) -> Board:
        """
        探索を実行し、選んだ着手後の盤面を返す

        Args:
            board: 正規化盤面（黒が手番）
            time_budget: 制限時間（秒）

        Returns:
            Board: 着手後の正規化盤面（黒が相手番）
        """
        return self.analyze(board, time_budget).board

    def analyze(self, board: Board, time_budget: float) -> SearchResult:
        """
        探索を実行し、統計情報付きの結果を返す

        合法手が0個ならパス（色反転した盤面）、1個ならその局面を
        探索せずに返す。

        Args:
            board: 正規化盤面（黒が手番）
            time_budget: 制限時間（秒）

        Returns:
            SearchResult: 探索結果
        """
        successors = board.legal_successors()
        if not successors:
            return SearchResult(board=board.flipped())
        if len(successors) == 1:
            return SearchResult(board=successors[0])

        tree = SearchTree(
            exploration_const=self.exploration_const,
            min_visits_to_expand=self.min_visits_to_expand,
        )
        root = tree.add_node(board, Color.BLACK)
        tree.expand(root)

        start = self.timer()
        # ルートに子ができるまでは制限時間に関係なく続ける
        while tree.is_leaf(root) or self.timer() - start < time_budget:
            self._run_iteration(tree, root)
        elapsed = self.timer() - start

        best = tree.select_by_visits(root)
        return SearchResult(
            board=tree[best].board,
            num_games=tree[root].games,
            expected_occupation=tree[root].expected_occupation,
            elapsed=elapsed,
        )

    def _run_iteration(self, tree: SearchTree, root: int):
        """
        1回の反復を実行

        Select -> Playout (Backpropagate) -> Expand
        """
        current = root
        while not tree.is_leaf(current):
            current = tree.select_by_ucb(current)

        tree.playout(current, self.random_source)
        tree.expand(current)

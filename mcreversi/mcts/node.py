"""
MCTSノード定義

探索木のノードと、ノードを添字で管理する木 (SearchTree) を提供する。
ノードは親を添字で参照し、木が全ノードを所有する。探索が終われば
木ごと破棄する。

ノードの値 (mean) は「このノードに着手した側」から見た最終占有率の
期待値で、UCB で子を選ぶ親の手番にとって大きいほど良い。
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from mcreversi.board import Board, Color
from .random_source import RandomSource

EXPLORATION_CONST = math.sqrt(2)
MIN_VISITS_TO_EXPAND = 1


@dataclass
class SearchNode:
    """
    MCTSの木構造ノード

    Attributes:
        board: 正規化盤面（黒がこのノードの手番）
        player: このノードで手番の色
        parent: 親ノードの添字（ルートは None）
        is_pass_move: 合法手がなくパスするノードか
        games: 訪問回数
        mean: プレイアウト結果の平均 [0, 1]
        children: 子ノードの添字
    """
    board: Board
    player: Color
    parent: Optional[int] = None
    is_pass_move: bool = False
    games: int = 0
    mean: float = 0.0
    children: List[int] = field(default_factory=list)

    def update(self, value: float):
        """
        統計情報を更新（逐次平均）

        Args:
            value: プレイアウト結果 [0, 1]
        """
        self.mean = (self.games * self.mean + value) / (self.games + 1)
        self.games += 1

    def ucb(self, parent_games: int, exploration_const: float) -> float:
        """
        UCB1値

        未訪問のノードは無限大（全ての子が一度は選ばれる）。
        """
        assert self.games <= parent_games, "child visited more often than parent"
        if self.games == 0:
            return math.inf
        bias = exploration_const * math.sqrt(math.log(parent_games) / self.games)
        return self.mean + bias

    @property
    def expected_occupation(self) -> float:
        """このノードの手番側から見た最終占有率の期待値"""
        return 1.0 - self.mean

    def __repr__(self) -> str:
        return (f"SearchNode(player={self.player.name}, "
                f"N={self.games}, "
                f"Q={self.mean:.3f}, "
                f"pass={self.is_pass_move}, "
                f"children={len(self.children)})")


class SearchTree:
    """
    探索木

    ノードはリスト nodes に格納され、添字で参照される。
    """

    def __init__(
        self,
        exploration_const: float = EXPLORATION_CONST,
        min_visits_to_expand: int = MIN_VISITS_TO_EXPAND,
    ):
        """
        Args:
            exploration_const: UCB1の探索定数
            min_visits_to_expand: 展開に必要な訪問回数
        """
        self.exploration_const = exploration_const
        self.min_visits_to_expand = min_visits_to_expand
        self.nodes: List[SearchNode] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> SearchNode:
        return self.nodes[index]

    def add_node(
        self, board: Board, player: Color, parent: Optional[int] = None
    ) -> int:
        """
        ノードを追加し、親の子リストに登録する

        Returns:
            int: 追加したノードの添字
        """
        index = len(self.nodes)
        self.nodes.append(SearchNode(board=board, player=player, parent=parent))
        if parent is not None:
            self.nodes[parent].children.append(index)
        return index

    def _parent_is_pass(self, node: SearchNode) -> bool:
        return node.parent is not None and self.nodes[node.parent].is_pass_move

    def is_leaf(self, index: int) -> bool:
        """
        リーフノードかどうか

        子がない、盤面が埋まっている、または親子で連続パスしている場合。
        """
        node = self.nodes[index]
        return (
            not node.children
            or node.board.is_filled()
            or (node.is_pass_move and self._parent_is_pass(node))
        )

    def expand(self, index: int):
        """
        ノードを展開し、合法手ごとに子ノードを作成

        訪問回数が min_visits_to_expand に満たないノードと、既に子を持つ
        ノードは展開しない。合法手がない場合はパスノードとなり、色反転した
        盤面の子を1つだけ作る。ただし親もパスノードなら終局なので作らない。
        """
        node = self.nodes[index]
        if node.is_pass_move:
            assert node.parent is not None, "pass node without parent"
            if self._parent_is_pass(node):
                return
        if node.children or node.games < self.min_visits_to_expand:
            return

        next_player = node.player.opponent
        successors = node.board.legal_successors()
        node.is_pass_move = not successors
        if node.is_pass_move:
            assert node.parent is not None, "pass node without parent"
            if not self._parent_is_pass(node):
                self.add_node(node.board.flipped(), next_player, parent=index)
        else:
            for board in successors:
                self.add_node(board, next_player, parent=index)

    def select_by_ucb(self, index: int) -> int:
        """
        UCB1値が最大の子ノードを選択

        同値の場合は先に現れた子を選ぶ。

        Returns:
            int: 選択した子ノードの添字
        """
        node = self.nodes[index]
        assert node.children, "cannot select from a node without children"

        best_score = -math.inf
        best_child = node.children[0]
        for child_index in node.children:
            score = self.nodes[child_index].ucb(node.games, self.exploration_const)
            if score > best_score:
                best_score = score
                best_child = child_index
        return best_child

    def select_by_visits(self, index: int) -> int:
        """訪問回数が最大の子ノードを選択（robust child）"""
        node = self.nodes[index]
        assert node.children, "cannot select from a node without children"

        counts = np.array([self.nodes[c].games for c in node.children])
        return node.children[int(np.argmax(counts))]

    def playout(self, index: int, random_source: RandomSource) -> float:
        """
        ランダムプレイアウトを実行し、結果を逆伝播する

        盤面が埋まるか連続パスになるまでランダムに着手する。
        終局時の黒の占有率は終局時の手番側のものなので、このノードの
        手番と比較して「このノードに着手した側」の値に直す。

        Returns:
            float: このノードに伝播した値
        """
        node = self.nodes[index]
        current = node.board
        player = node.player
        passed = node.is_pass_move
        while not current.is_filled():
            boards = current.legal_successors()
            if not boards:
                if passed:
                    break
                passed = True
                current = current.flipped()
            else:
                passed = False
                current = boards[random_source.uniform_index(len(boards))]
            player = player.opponent

        occupation = current.black_occupation()
        if player == node.player:
            value = 1.0 - occupation
        else:
            value = occupation
        self.propagate_result(index, value)
        return value

    def propagate_result(self, index: Optional[int], value: float):
        """
        結果をルートまで伝播

        1段上がるごとに手番が入れ替わるため、値を 1 - value に反転する。
        """
        while index is not None:
            node = self.nodes[index]
            node.update(value)
            value = 1.0 - value
            index = node.parent

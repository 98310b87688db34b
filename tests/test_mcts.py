"""
MCTSのテストケース

- RandomSourceの基本機能テスト
- SearchTree / SearchNode の統計・選択・展開・プレイアウトのテスト
- MCTS探索エンジンのテスト
"""

import math
from unittest import mock

import pytest

from mcreversi.board import Board, Color
from mcreversi.mcts import MCTS, RandomSource, SearchTree, get_default_random_source


class FakeTimer:
    """呼ばれるたびに step 秒進む時計"""

    def __init__(self, step: float = 1.0):
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


def failing_timer() -> float:
    raise AssertionError("timer must not be used")


# 残り1マスを埋めると全て黒になる盤面
ONE_MOVE_TO_FILL = "X" * 62 + "O."

# 合法手がちょうど1つの盤面 (c1 のみ)
SINGLE_MOVE = "XO" + "." * 62


class TestRandomSource:
    """RandomSourceのテスト"""

    def test_index_in_range(self):
        random_source = RandomSource(seed=0)
        for _ in range(200):
            assert 0 <= random_source.uniform_index(5) < 5

    def test_seeded_sequences_match(self):
        """同じシードなら同じ系列"""
        a = RandomSource(seed=42)
        b = RandomSource(seed=42)
        assert [a.uniform_index(10) for _ in range(20)] == \
               [b.uniform_index(10) for _ in range(20)]

    def test_single_choice_consumes_no_randomness(self):
        """n == 1 のときは乱数を消費しない"""
        random_source = RandomSource(seed=0)
        random_source.generator = mock.Mock()

        assert random_source.uniform_index(1) == 0
        random_source.generator.integers.assert_not_called()

    @pytest.mark.parametrize("n", [0, -1])
    def test_invalid_n_raises(self, n):
        with pytest.raises(ValueError):
            RandomSource(seed=0).uniform_index(n)

    def test_default_source_is_shared(self):
        """プロセス共通の乱数源は1つだけ"""
        assert get_default_random_source() is get_default_random_source()


class TestSearchNodeStatistics:
    """ノードの統計更新テスト"""

    def test_node_initialization(self):
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        node = tree[root]

        assert node.games == 0
        assert node.mean == 0.0
        assert node.parent is None
        assert not node.is_pass_move
        assert tree.is_leaf(root)

    def test_mean_is_arithmetic_mean(self):
        """平均値は伝播された値の算術平均"""
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        values = [0.1, 0.5, 0.9, 0.3, 1.0, 0.0]

        for value in values:
            tree.propagate_result(root, value)
            assert 0.0 <= tree[root].mean <= 1.0

        assert tree[root].games == len(values)
        assert tree[root].mean == pytest.approx(sum(values) / len(values))

    def test_propagation_alternates_perspective(self):
        """1段上がるごとに値が 1 - value に反転する"""
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        child = tree.add_node(Board(), Color.WHITE, parent=root)
        grandchild = tree.add_node(Board(), Color.BLACK, parent=child)

        tree.propagate_result(grandchild, 0.8)

        assert tree[grandchild].mean == pytest.approx(0.8)
        assert tree[child].mean == pytest.approx(0.2)
        assert tree[root].mean == pytest.approx(0.8)
        assert [tree[i].games for i in (root, child, grandchild)] == [1, 1, 1]

    def test_expected_occupation(self):
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        tree.propagate_result(root, 0.25)
        assert tree[root].expected_occupation == pytest.approx(0.75)


def make_root_with_children(stats):
    """(games, mean) のリストから子を持つルートを作る"""
    tree = SearchTree()
    root = tree.add_node(Board(), Color.BLACK)
    tree[root].games = max(1, sum(games for games, _ in stats))
    for games, mean in stats:
        child = tree.add_node(Board(), Color.WHITE, parent=root)
        tree[child].games = games
        tree[child].mean = mean
    return tree, root


class TestSelection:
    """子ノード選択テスト"""

    def test_unvisited_child_selected_first(self):
        """未訪問の子は常に優先される"""
        tree, root = make_root_with_children([(5, 0.9), (0, 0.0), (5, 0.1)])
        assert tree.select_by_ucb(root) == tree[root].children[1]

    def test_ties_resolved_by_first(self):
        """同値なら先に現れた子"""
        tree, root = make_root_with_children([(0, 0.0), (0, 0.0), (0, 0.0)])
        assert tree.select_by_ucb(root) == tree[root].children[0]

    def test_ucb_exploration_term(self):
        """訪問の少ない子が探索項で選ばれる"""
        tree, root = make_root_with_children([(8, 0.6), (1, 0.5)])

        children = tree[root].children
        parent_games = tree[root].games
        c = math.sqrt(2)
        score0 = 0.6 + c * math.sqrt(math.log(parent_games) / 8)
        score1 = 0.5 + c * math.sqrt(math.log(parent_games) / 1)

        assert tree[children[0]].ucb(parent_games, c) == pytest.approx(score0)
        assert tree[children[1]].ucb(parent_games, c) == pytest.approx(score1)
        assert tree.select_by_ucb(root) == children[1]

    def test_ucb_exploitation(self):
        """訪問回数が同じなら平均値の高い子"""
        tree, root = make_root_with_children([(5, 0.2), (5, 0.7), (5, 0.4)])
        assert tree.select_by_ucb(root) == tree[root].children[1]

    def test_every_child_tried_before_revisit(self):
        """全ての子が1回ずつ選ばれてから再訪問される"""
        tree, root = make_root_with_children([(0, 0.0)] * 4)
        seen = []
        for _ in range(4):
            child = tree.select_by_ucb(root)
            seen.append(child)
            tree.propagate_result(child, 0.5)

        assert sorted(seen) == sorted(tree[root].children)

    def test_select_by_visits(self):
        """訪問回数が最大の子（同数なら先の子）"""
        tree, root = make_root_with_children([(3, 0.9), (7, 0.1), (7, 0.5)])
        assert tree.select_by_visits(root) == tree[root].children[1]

    def test_select_without_children_fails(self):
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        with pytest.raises(AssertionError):
            tree.select_by_visits(root)


class TestExpansion:
    """ノード展開テスト"""

    def test_no_expansion_before_first_visit(self):
        """訪問前のノードは展開しない"""
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)

        tree.expand(root)

        assert tree[root].children == []
        assert tree.is_leaf(root)

    def test_expand_creates_child_per_move(self):
        """合法手ごとに相手番の子ノードを作る"""
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        tree.propagate_result(root, 0.5)

        tree.expand(root)

        children = [tree[c] for c in tree[root].children]
        assert [c.board for c in children] == Board().legal_successors()
        assert all(c.player is Color.WHITE for c in children)
        assert all(c.parent == root for c in children)
        assert not tree[root].is_pass_move
        assert not tree.is_leaf(root)

    def test_expand_is_idempotent(self):
        """既に子を持つノードは再展開しない"""
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        tree.propagate_result(root, 0.5)
        tree.expand(root)
        tree.propagate_result(root, 0.5)
        tree.expand(root)

        assert len(tree[root].children) == 4
        assert len(tree) == 5

    def test_min_visits_to_expand(self):
        tree = SearchTree(min_visits_to_expand=2)
        root = tree.add_node(Board(), Color.BLACK)
        tree.propagate_result(root, 0.5)
        tree.expand(root)
        assert tree[root].children == []

        tree.propagate_result(root, 0.5)
        tree.expand(root)
        assert len(tree[root].children) == 4

    def test_forced_pass_creates_single_child(self):
        """合法手がなければパスノードとなり、色反転した子を1つ作る"""
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        stuck = tree.add_node(Board("X" + "." * 63), Color.WHITE, parent=root)
        tree.propagate_result(stuck, 0.5)

        tree.expand(stuck)

        assert tree[stuck].is_pass_move
        assert len(tree[stuck].children) == 1
        child = tree[tree[stuck].children[0]]
        assert child.board == Board("O" + "." * 63)
        assert child.player is Color.BLACK

    def test_second_consecutive_pass_has_no_child(self):
        """連続パスは終局なので子を作らず、リーフのまま"""
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        stuck = tree.add_node(Board("X" + "." * 63), Color.WHITE, parent=root)
        tree.propagate_result(stuck, 0.5)
        tree.expand(stuck)
        passed = tree[stuck].children[0]
        tree.propagate_result(passed, 0.5)

        tree.expand(passed)

        assert tree[passed].is_pass_move
        assert tree[passed].children == []
        assert tree.is_leaf(passed)

        # 再展開しても変わらない
        tree.propagate_result(passed, 0.5)
        tree.expand(passed)
        assert tree[passed].children == []

    def test_pass_at_root_is_invariant_violation(self):
        """親のないパスノードは不変条件違反"""
        tree = SearchTree()
        root = tree.add_node(Board("X" + "." * 63), Color.BLACK)
        tree.propagate_result(root, 0.5)

        with pytest.raises(AssertionError):
            tree.expand(root)

    def test_filled_board_is_leaf(self):
        tree = SearchTree()
        root = tree.add_node(Board("X" * 64), Color.BLACK)
        assert tree.is_leaf(root)


class TestPlayout:
    """プレイアウトの値の向きのテスト（手計算した盤面）"""

    def test_filled_board(self):
        """埋まった盤面: 手番は変わらないので 1 - 黒占有率"""
        tree = SearchTree()
        node = tree.add_node(Board("X" * 40 + "O" * 24), Color.BLACK)

        value = tree.playout(node, RandomSource(seed=0))

        assert value == pytest.approx(1 - 40 / 64)
        assert tree[node].games == 1
        assert tree[node].mean == pytest.approx(0.375)
        assert tree[node].expected_occupation == pytest.approx(40 / 64)

    def test_last_move_fills_board(self):
        """最後の1手で全マスが手番側になる: 手番が変わるので占有率そのまま (0)"""
        tree = SearchTree()
        node = tree.add_node(Board(ONE_MOVE_TO_FILL), Color.BLACK)

        value = tree.playout(node, RandomSource(seed=0))

        assert value == pytest.approx(0.0)
        assert tree[node].expected_occupation == pytest.approx(1.0)

    def test_double_pass_ends_playout(self):
        """両者とも着手できなければ連続パスで終了する"""
        tree = SearchTree()
        node = tree.add_node(Board("X" + "." * 63), Color.BLACK)

        value = tree.playout(node, RandomSource(seed=0))

        # 1回パスした時点の手番は白。白の石は0個
        assert value == pytest.approx(0.0)
        assert tree[node].expected_occupation == pytest.approx(1.0)

    def test_playout_value_propagates_to_parent(self):
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        child = tree.add_node(Board("X" * 40 + "O" * 24), Color.WHITE, parent=root)

        tree.playout(child, RandomSource(seed=0))

        assert tree[child].mean == pytest.approx(0.375)
        assert tree[root].mean == pytest.approx(0.625)

    def test_random_playout_value_in_range(self):
        tree = SearchTree()
        root = tree.add_node(Board(), Color.BLACK)
        random_source = RandomSource(seed=7)

        for _ in range(5):
            value = tree.playout(root, random_source)
            assert 0.0 <= value <= 1.0

        assert tree[root].games == 5


class TestMCTS:
    """MCTS探索エンジンのテスト"""

    def test_no_moves_returns_pass(self):
        """合法手がなければ色反転した盤面を返す"""
        board = Board("X" + "." * 63)
        mcts = MCTS(random_source=RandomSource(seed=0), timer=failing_timer)

        assert mcts.search(board, 10.0) == board.flipped()

    def test_single_move_returned_without_search(self):
        """合法手が1つなら探索せずに返す"""
        board = Board(SINGLE_MOVE)
        mcts = MCTS(random_source=RandomSource(seed=0), timer=failing_timer)

        result = mcts.analyze(board, 10.0)

        assert result.board == board.legal_successors()[0]
        assert result.num_games == 0
        assert result.expected_occupation is None

    def test_search_returns_legal_successor(self):
        board = Board()
        mcts = MCTS(random_source=RandomSource(seed=0), timer=FakeTimer())

        result = mcts.analyze(board, 20.0)

        assert result.board in board.legal_successors()
        assert result.num_games > 4
        assert 0.0 <= result.expected_occupation <= 1.0
        assert result.summary().startswith(f"#games: {result.num_games}, occupation: ")

    def test_zero_budget_still_chooses_move(self):
        """制限時間0でもルートが展開されるまでは探索する"""
        board = Board()
        mcts = MCTS(random_source=RandomSource(seed=0), timer=FakeTimer())

        result = mcts.analyze(board, 0.0)

        assert result.board in board.legal_successors()
        assert result.num_games >= 1

    def test_seeded_search_is_reproducible(self):
        """同じシードと時計なら同じ手を選ぶ"""
        board = Board()
        first = MCTS(random_source=RandomSource(seed=3), timer=FakeTimer()).analyze(board, 15.0)
        second = MCTS(random_source=RandomSource(seed=3), timer=FakeTimer()).analyze(board, 15.0)

        assert first.board == second.board
        assert first.num_games == second.num_games
        assert first.expected_occupation == second.expected_occupation

    def test_prefers_stronger_move(self):
        """終盤の2択で最終石数の多い手を選ぶ"""
        # a1: 白はパスし、黒が h1 も取って 63-1
        # h1: 白が a1 から a2, a3 を取り返して 59-5
        layout = (
            ".OXXXXO."
            "XXXXXXXX"
            "XXXXXXXX"
            "OXXXXXXX"
            + "X" * 32
        )
        board = Board(layout)
        assert board.legal_moves() == [(0, 0), (7, 0)]

        mcts = MCTS(random_source=RandomSource(seed=0), timer=FakeTimer())
        result = mcts.analyze(board, 200.0)

        expected = board.copy()
        expected.try_place(0, 0)
        expected.flip_colors()
        assert result.board == expected
        assert result.expected_occupation > 59 / 64

"""
オセロプレイヤークラス

対戦用の様々なプレイヤーを実装:
- RandomPlayer: ランダムに着手
- GreedyPlayer: 最も多く石を取れる手を選択
- MCTSPlayer: モンテカルロ木探索のAI
- HumanPlayer: 標準入力から着手
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from mcreversi.board import (
    PASS,
    GamePosition,
    format_move,
    parse_move,
    xy_to_action,
)
from mcreversi.mcts import MCTS, RandomSource, SearchResult


class Player(ABC):
    """
    プレイヤーの基底クラス
    """

    def __init__(self, name: str):
        """
        Args:
            name: プレイヤー名
        """
        self.name = name

    @abstractmethod
    def get_action(self, position: GamePosition) -> int:
        """
        着手を選択

        Args:
            position: 現在の局面

        Returns:
            int: 着手位置 (0-63)、パスは 64
        """
        pass

    def reset(self):
        """ゲーム開始時の初期化（必要に応じてオーバーライド）"""
        pass


class RandomPlayer(Player):
    """
    ランダムプレイヤー

    合法手の中からランダムに選択
    """

    def __init__(self, name: str = "Random", random_source: Optional[RandomSource] = None):
        super().__init__(name)
        self.random_source = random_source or RandomSource()

    def get_action(self, position: GamePosition) -> int:
        """ランダムに着手を選択"""
        legal_moves = position.get_legal_moves()

        if len(legal_moves) == 0:
            return PASS

        return legal_moves[self.random_source.uniform_index(len(legal_moves))]


class GreedyPlayer(Player):
    """
    貪欲プレイヤー

    着手後の自分の石数が最も多くなる手を選択
    """

    def __init__(self, name: str = "Greedy"):
        super().__init__(name)

    def get_action(self, position: GamePosition) -> int:
        """最も多く石を取れる手を選択"""
        board = position.canonical()
        legal_moves = board.legal_moves()

        if len(legal_moves) == 0:
            return PASS

        best_action = xy_to_action(*legal_moves[0])
        best_score = -1

        for x, y in legal_moves:
            test_board = board.copy()
            test_board.try_place(x, y)

            # 正規化盤面なので黒が自分
            score, _ = test_board.get_stone_counts()
            if score > best_score:
                best_score = score
                best_action = xy_to_action(x, y)

        return best_action


class MCTSPlayer(Player):
    """
    MCTSベースのAIプレイヤー

    制限時間内でランダムプレイアウトによる探索を行う
    """

    def __init__(
        self,
        mcts: Optional[MCTS] = None,
        time_budget: float = 1.0,
        name: Optional[str] = None,
        verbose: bool = False,
    ):
        """
        Args:
            mcts: 探索エンジン（省略時は既定設定で作成）
            time_budget: 1手あたりの思考時間（秒）
            name: プレイヤー名
            verbose: 探索統計を表示するか
        """
        if name is None:
            name = f"MCTS-{time_budget:g}s"
        super().__init__(name)

        self.mcts = mcts or MCTS()
        self.time_budget = time_budget
        self.verbose = verbose
        self.last_result: Optional[SearchResult] = None

    @classmethod
    def from_config(cls, config: dict, name: Optional[str] = None):
        """
        設定辞書から MCTSPlayer を作成

        Args:
            config: load_config() の戻り値
            name: プレイヤー名

        Returns:
            MCTSPlayer: インスタンス
        """
        mcts_config = config['mcts']
        mcts = MCTS(
            exploration_const=mcts_config['exploration_const'],
            min_visits_to_expand=mcts_config['min_visits_to_expand'],
            random_source=RandomSource(config['system'].get('seed')),
        )
        return cls(
            mcts=mcts,
            time_budget=mcts_config['time_budget'],
            name=name,
            verbose=config['display'].get('verbose', False),
        )

    def get_action(self, position: GamePosition) -> int:
        """MCTSで最良の手を選択"""
        self.last_result = None
        board = position.canonical()
        moves = board.legal_moves()

        if len(moves) == 0:
            return PASS

        result = self.mcts.analyze(board, self.time_budget)
        self.last_result = result

        if self.verbose and result.num_games > 0:
            print(result.summary())

        # 選ばれた後続局面に対応する着手を探す
        successors = board.legal_successors()
        x, y = moves[successors.index(result.board)]
        return xy_to_action(x, y)


class HumanPlayer(Player):
    """
    人間プレイヤー（CLI用）

    標準入力から "f5" 形式で着手を受け付ける
    """

    def __init__(
        self,
        name: str = "Human",
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ):
        """
        Args:
            name: プレイヤー名
            input_func: 入力関数（テスト用に差し替え可能）
            output_func: 出力関数
        """
        super().__init__(name)
        self.input_func = input_func
        self.output_func = output_func

    def get_action(self, position: GamePosition) -> int:
        """
        標準入力から着手を受け付ける

        合法手を入力するまで再入力を求める。EOFError と KeyboardInterrupt
        は呼び出し側に伝播する。
        """
        legal_moves = position.get_legal_moves()

        if len(legal_moves) == 0:
            self.output_func("パスします")
            return PASS

        while True:
            move = parse_move(self.input_func("move? "))
            if move is None:
                continue
            action = xy_to_action(*move)
            if action in legal_moves:
                return action
            self.output_func(f"{format_move(*move)} には置けません")

"""
対局の記録と集計 (Arena)

2つのプレイヤーを実際の色で対局させ、色ごとに着手数・パス数・
最終石数と、MCTSプレイヤーの探索統計（#games, occupation）を記録する
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mcreversi.board import PASS, Color, GamePosition, action_to_xy, format_move, render_position
from mcreversi.mcts import SearchResult
from .players import MCTSPlayer, Player

_SYMBOLS = {Color.BLACK: "X", Color.WHITE: "O"}


class IllegalActionError(RuntimeError):
    """プレイヤーが非合法な着手を返した"""


@dataclass
class SideRecord:
    """
    片方の色の記録

    Attributes:
        name: プレイヤー名
        color: 担当した色
        stones: 終局時の石数
        moves: 着手数（パスを除く）
        passes: パスの回数
        searches: 探索を行った手の探索結果
    """
    name: str
    color: Color
    stones: int = 0
    moves: int = 0
    passes: int = 0
    searches: List[SearchResult] = field(default_factory=list)

    @property
    def playouts(self) -> int:
        """このゲームで行ったプレイアウトの総数"""
        return sum(result.num_games for result in self.searches)

    def mean_occupation(self) -> Optional[float]:
        """探索が見積もった最終占有率の平均（探索していなければ None）"""
        if not self.searches:
            return None
        return sum(r.expected_occupation for r in self.searches) / len(self.searches)


@dataclass
class GameRecord:
    """1局の記録"""
    black: SideRecord
    white: SideRecord
    duration: float = 0.0

    @property
    def num_moves(self) -> int:
        """総手数（パスを含む）"""
        return sum(s.moves + s.passes for s in (self.black, self.white))

    @property
    def winner(self) -> Optional[Color]:
        """勝った色。引き分けは None"""
        if self.black.stones == self.white.stones:
            return None
        return Color.BLACK if self.black.stones > self.white.stones else Color.WHITE

    def side(self, name: str) -> SideRecord:
        """プレイヤー名から記録を引く"""
        for record in (self.black, self.white):
            if record.name == name:
                return record
        raise KeyError(name)

    def __str__(self) -> str:
        return (
            f"X {self.black.name}: {self.black.stones} - "
            f"O {self.white.name}: {self.white.stones} | "
            f"moves: {self.num_moves}, passes: {self.black.passes}/{self.white.passes} | "
            f"{self.duration:.2f}s"
        )


@dataclass
class Tally:
    """
    複数局の集計（1プレイヤー分）

    Attributes:
        name: プレイヤー名
        games: 対局数
        wins / losses / draws: 勝敗
        stones: 終局時の石数の合計
        passes: パスの合計
        searches: 探索した手数の合計
        playouts: プレイアウトの合計
    """
    name: str
    games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    stones: int = 0
    passes: int = 0
    searches: int = 0
    playouts: int = 0

    @property
    def mean_stones(self) -> float:
        return self.stones / self.games if self.games else 0.0

    @property
    def playouts_per_search(self) -> float:
        return self.playouts / self.searches if self.searches else 0.0

    def __str__(self) -> str:
        text = (
            f"{self.name}: {self.wins}W-{self.losses}L-{self.draws}D, "
            f"stones: {self.mean_stones:.1f}, passes: {self.passes}"
        )
        if self.searches:
            text += f", #games/move: {self.playouts_per_search:.0f}"
        return text


def tally(records: List[GameRecord], name: str) -> Tally:
    """
    対局記録をプレイヤー単位で集計

    Args:
        records: 対局記録
        name: 集計するプレイヤー名

    Returns:
        Tally: 集計結果
    """
    result = Tally(name=name)
    for record in records:
        own = record.side(name)
        result.games += 1
        result.stones += own.stones
        result.passes += own.passes
        result.searches += len(own.searches)
        result.playouts += own.playouts
        if record.winner is None:
            result.draws += 1
        elif record.winner is own.color:
            result.wins += 1
        else:
            result.losses += 1
    return result


class Arena:
    """
    対局管理

    黒番・白番のプレイヤーを交互に呼び、局面が終局するまで進める
    """

    def __init__(self, verbose: bool = True):
        """
        Args:
            verbose: 着手と探索統計を表示するか
        """
        self.verbose = verbose

    def play_game(self, black: Player, white: Player) -> GameRecord:
        """
        1局を実行

        Args:
            black: 先手（黒番）
            white: 後手（白番）

        Returns:
            GameRecord: 対局記録

        Raises:
            IllegalActionError: プレイヤーが非合法な着手を返した場合
        """
        players: Dict[Color, Player] = {Color.BLACK: black, Color.WHITE: white}
        sides = {color: SideRecord(p.name, color) for color, p in players.items()}
        position = GamePosition.initial()

        black.reset()
        white.reset()
        start_time = time.time()

        while not position.is_terminal():
            color = position.to_move
            player = players[color]
            action = player.get_action(position)

            if not position.make_move(action):
                raise IllegalActionError(f"{player.name} returned illegal action {action}")
            self._record_action(sides[color], player, action)

        sides[Color.BLACK].stones, sides[Color.WHITE].stones = position.get_stone_counts()
        record = GameRecord(
            black=sides[Color.BLACK],
            white=sides[Color.WHITE],
            duration=time.time() - start_time,
        )

        if self.verbose:
            print(render_position(position))
            print(record)
        return record

    def _record_action(self, side: SideRecord, player: Player, action: int):
        """1手分を記録"""
        if action == PASS:
            side.passes += 1
            move = "pass"
        else:
            side.moves += 1
            move = format_move(*action_to_xy(action))

        search = player.last_result if isinstance(player, MCTSPlayer) else None
        if search is not None and search.num_games > 0:
            side.searches.append(search)

        if self.verbose:
            line = f"{_SYMBOLS[side.color]} {side.name}: {move}"
            if search is not None and search.num_games > 0:
                line += f" ({search.summary()})"
            print(line)

    def play_series(self, player1: Player, player2: Player, num_games: int = 10) -> List[GameRecord]:
        """
        先後を入れ替えながら複数局を実行

        偶数局目（0始まり）は player1 が黒番

        Returns:
            List[GameRecord]: 対局記録のリスト

        Raises:
            ValueError: 2人の名前が同じ場合（記録を名前で引くため）
        """
        if player1.name == player2.name:
            raise ValueError(f"Player names must differ: {player1.name!r}")

        records = []
        for game_idx in range(num_games):
            if self.verbose:
                print(f"=== Game {game_idx + 1}/{num_games} ===")
            if game_idx % 2 == 0:
                records.append(self.play_game(player1, player2))
            else:
                records.append(self.play_game(player2, player1))

        if self.verbose and records:
            print(tally(records, player1.name))
            print(tally(records, player2.name))
        return records

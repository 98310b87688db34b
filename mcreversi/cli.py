"""
Othello MCTS - CLIエントリポイント

人間 vs AI の対局を端末で行う

使用方法:
    python main.py [TIME] [--config PATH] [--seed SEED] [--human-color {black,white}]
"""

import argparse
from typing import Callable, Optional

from mcreversi.board import Color, GamePosition, render_position
from mcreversi.config import load_config
from mcreversi.eval import HumanPlayer, IllegalActionError, MCTSPlayer, Player


def play_game(
    human: Player,
    ai: Player,
    human_color: Color = Color.BLACK,
    output_func: Callable[[str], None] = print,
) -> GamePosition:
    """
    1局を最後まで進める

    着手ごとに盤面を表示する。合法手がない側は自動的にパスする。

    Args:
        human: 人間プレイヤー
        ai: AIプレイヤー
        human_color: 人間の色
        output_func: 出力関数

    Returns:
        GamePosition: 終局時の局面
    """
    players = {human_color: human, human_color.opponent: ai}
    position = GamePosition.initial()
    output_func(render_position(position))

    while not position.is_terminal():
        player = players[position.to_move]
        action = player.get_action(position)
        if not position.make_move(action):
            raise IllegalActionError(f"{player.name} returned illegal action {action}")
        output_func(render_position(position))

    black, white = position.get_stone_counts()
    output_func(f"X: {black}, O: {white}")
    return position


def non_negative_int(text: str) -> int:
    """0 以上の整数を受け付ける argparse 型（乱数シード用）"""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Othello MCTS - play against the computer")
    parser.add_argument(
        'time',
        type=float,
        nargs='?',
        default=None,
        help='AI thinking time per move in seconds (default: 1.0)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to YAML config file (default: built-in settings)'
    )
    parser.add_argument(
        '--seed',
        type=non_negative_int,
        default=None,
        help='Random seed for playouts (default: OS entropy)'
    )
    parser.add_argument(
        '--human-color',
        choices=['black', 'white'],
        default='black',
        help='Color played by the human (default: black, moves first)'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Do not print search statistics'
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """メインエントリポイント"""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.time is not None:
        config['mcts']['time_budget'] = args.time
    if args.seed is not None:
        config['system']['seed'] = args.seed
    if args.quiet:
        config['display']['verbose'] = False

    ai = MCTSPlayer.from_config(config, name="Computer")
    human = HumanPlayer()
    human_color = Color.BLACK if args.human_color == 'black' else Color.WHITE

    try:
        play_game(human, ai, human_color=human_color)
    except (EOFError, KeyboardInterrupt):
        print("\n中断しました")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

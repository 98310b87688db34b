"""
AIベンチマークスクリプト

MCTSプレイヤーを基準プレイヤーと先後交互に対局させ、
勝敗と1手あたりのプレイアウト数（#games）・占有率の見積もりを記録する

Usage:
    python benchmark_ai.py --time 0.5 --games 10
"""

import argparse
import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

import numpy as np

from mcreversi.config import load_config
from mcreversi.eval import Arena, GreedyPlayer, MCTSPlayer, RandomPlayer, tally


def search_statistics(records, name: str) -> dict:
    """探索した手ごとの #games と occupation の分布"""
    searches = [s for record in records for s in record.side(name).searches]
    if not searches:
        return {"searches": 0}

    games = np.array([s.num_games for s in searches])
    occupation = np.array([s.expected_occupation for s in searches])
    return {
        "searches": len(searches),
        "games_min": int(games.min()),
        "games_mean": float(games.mean()),
        "games_max": int(games.max()),
        "occupation_first": float(occupation[0]),
        "occupation_mean": float(occupation.mean()),
    }


def benchmark_mcts(config: dict, num_games: int = 10, output_dir: str = "data/benchmark") -> dict:
    """
    MCTSプレイヤーをベンチマーク

    Args:
        config: 設定辞書
        num_games: 各対戦相手とのゲーム数
        output_dir: 結果保存ディレクトリ

    Returns:
        dict: ベンチマーク結果（JSONにも保存）
    """
    config['display']['verbose'] = False
    ai_player = MCTSPlayer.from_config(config, name="MCTS")
    arena = Arena(verbose=False)

    print(f"time budget: {config['mcts']['time_budget']:g}s/move, "
          f"games per opponent: {num_games}")

    report = {
        "timestamp": datetime.now().isoformat(),
        "mcts": config['mcts'],
        "num_games": num_games,
        "opponents": {},
    }

    for opponent in (RandomPlayer(name="Random"), GreedyPlayer(name="Greedy")):
        records = arena.play_series(ai_player, opponent, num_games=num_games)
        ai_tally = tally(records, ai_player.name)
        stats = search_statistics(records, ai_player.name)

        print(f"vs {opponent.name}: {ai_tally}")
        if stats["searches"]:
            print(f"  #games: {stats['games_min']}-{stats['games_max']} "
                  f"(mean {stats['games_mean']:.0f}), "
                  f"occupation: {stats['occupation_mean']:.3f}")

        report["opponents"][opponent.name] = {
            "tally": asdict(ai_tally),
            "search": stats,
        }

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    result_file = output_path / f"benchmark_{datetime.now():%Y%m%d_%H%M%S}.json"
    with open(result_file, "w") as f:
        json.dump(report, f, indent=2)

    print(f"saved: {result_file}")
    return report


def main():
    parser = argparse.ArgumentParser(description="MCTS benchmark against baseline players")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--time", type=float, default=None,
                        help="Thinking time per move in seconds (overrides config)")
    parser.add_argument("--games", type=int, default=10,
                        help="Number of games per opponent (default: 10)")
    parser.add_argument("--output", type=str, default="data/benchmark",
                        help="Output directory (default: data/benchmark)")
    args = parser.parse_args()

    config = load_config(args.config)
    if args.time is not None:
        config['mcts']['time_budget'] = args.time

    benchmark_mcts(config, num_games=args.games, output_dir=args.output)


if __name__ == "__main__":
    main()

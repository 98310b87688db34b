"""盤面とプレイアウトのベンチマーク

ランダムプレイアウトの速度（Playouts/sec）と探索の反復回数を計測する。

使用方法:
    python benchmark.py
"""

import time

from mcreversi.board import Board, Color
from mcreversi.mcts import MCTS, RandomSource, SearchTree


def benchmark_playouts(num_playouts: int = 1000, seed: int = 0) -> None:
    """初期局面からのランダムプレイアウトを計測

    Args:
        num_playouts: プレイアウト回数
        seed: 乱数シード
    """
    print(f"=== オセロ プレイアウト ベンチマーク ===")
    print(f"プレイアウト数: {num_playouts:,}")
    print()

    random_source = RandomSource(seed)
    tree = SearchTree()
    root = tree.add_node(Board(), Color.BLACK)

    print("計測中...")
    start_time = time.perf_counter()
    for _ in range(num_playouts):
        tree.playout(root, random_source)
    elapsed_time = time.perf_counter() - start_time

    print()
    print("=== 結果 ===")
    print(f"経過時間:       {elapsed_time:.2f} 秒")
    print(f"プレイアウト速度: {num_playouts / elapsed_time:,.0f} playouts/sec")
    print(f"黒の期待占有率:   {tree[root].expected_occupation:.3f}")
    print()


def benchmark_operations() -> None:
    """個別操作のベンチマーク"""
    print("=== 個別操作ベンチマーク ===")

    board = Board()
    iterations = 10000

    start = time.perf_counter()
    for _ in range(iterations):
        board.legal_successors()
    elapsed = time.perf_counter() - start
    print(f"legal_successors: {iterations/elapsed:,.0f} calls/sec")

    start = time.perf_counter()
    for _ in range(iterations):
        board.flipped()
    elapsed = time.perf_counter() - start
    print(f"flipped: {iterations/elapsed:,.0f} calls/sec")

    start = time.perf_counter()
    for _ in range(iterations):
        board.copy()
    elapsed = time.perf_counter() - start
    print(f"copy: {iterations/elapsed:,.0f} calls/sec")
    print()


def benchmark_search(time_budget: float = 1.0) -> None:
    """制限時間内の探索反復回数を計測"""
    print("=== 探索ベンチマーク ===")
    result = MCTS(random_source=RandomSource(0)).analyze(Board(), time_budget)
    print(f"制限時間: {time_budget:.1f} 秒")
    print(result.summary())
    print(f"反復速度: {result.num_games / result.elapsed:,.0f} iterations/sec")


if __name__ == "__main__":
    benchmark_playouts(1000)
    benchmark_operations()
    benchmark_search(1.0)

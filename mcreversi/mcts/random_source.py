"""
プレイアウト用の乱数源

numpy の Generator を包み、一様な添字選択だけを提供する。
探索エンジンには明示的に渡すことができ、渡さない場合はプロセス共通の
インスタンスを遅延生成して使う。
"""

from typing import Optional

import numpy as np


class RandomSource:
    """
    一様乱数による添字選択

    seed を省略すると OS のエントロピーで初期化される。
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: 乱数シード（None の場合は OS エントロピー）
        """
        self.generator = np.random.default_rng(seed)

    def uniform_index(self, n: int) -> int:
        """
        [0, n) の添字を一様に選ぶ

        n == 1 のときは乱数を消費せずに 0 を返す。

        Raises:
            ValueError: n < 1
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        if n == 1:
            return 0
        return int(self.generator.integers(n))


_default_source: Optional[RandomSource] = None


def get_default_random_source() -> RandomSource:
    """プロセス共通の乱数源（初回呼び出し時に生成）"""
    global _default_source
    if _default_source is None:
        _default_source = RandomSource()
    return _default_source

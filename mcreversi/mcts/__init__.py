"""
Monte Carlo Tree Search モジュール

ランダムプレイアウトによるUCT探索を提供
"""

from .mcts import MCTS, SearchResult
from .node import SearchNode, SearchTree
from .random_source import RandomSource, get_default_random_source

__all__ = [
    "MCTS",
    "SearchResult",
    "SearchNode",
    "SearchTree",
    "RandomSource",
    "get_default_random_source",
]

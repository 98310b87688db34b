"""
評価システムモジュール

AIの強さと探索量を測定するための対局・集計機能を提供
"""

from .players import (
    Player,
    RandomPlayer,
    GreedyPlayer,
    MCTSPlayer,
    HumanPlayer,
)
from .arena import Arena, GameRecord, IllegalActionError, SideRecord, Tally, tally

__all__ = [
    "Player",
    "RandomPlayer",
    "GreedyPlayer",
    "MCTSPlayer",
    "HumanPlayer",
    "Arena",
    "GameRecord",
    "IllegalActionError",
    "SideRecord",
    "Tally",
    "tally",
]

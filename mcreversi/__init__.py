"""
モンテカルロ木探索によるオセロAI

- board: 盤面と着手生成
- mcts: 探索エンジン
- eval: プレイヤーと対戦管理
"""

__version__ = "0.1.0"

"""
設定ファイルの読み込み

YAML設定ファイルを読み込み、既定値にマージして返す
"""

import copy
import math
from typing import Optional

import yaml

DEFAULT_CONFIG = {
    "mcts": {
        "time_budget": 1.0,
        "exploration_const": math.sqrt(2),
        "min_visits_to_expand": 1,
    },
    "system": {
        "seed": None,
    },
    "display": {
        "verbose": True,
    },
}


def _merge(base: dict, override: dict) -> dict:
    """
    override の値で base を再帰的に上書き

    値のないセクション（YAML の "mcts:" だけの行）は既定値を残す
    """
    for key, value in override.items():
        if value is None and isinstance(base.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Optional[str] = None) -> dict:
    """
    YAML設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス（None の場合は既定値のみ）

    Returns:
        dict: 設定辞書（既定値にマージ済み）

    Raises:
        FileNotFoundError: 指定されたファイルが存在しない場合
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    with open(config_path, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping: {config_path}")
    return _merge(config, loaded)

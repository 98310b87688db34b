#!/usr/bin/env python
"""
対局起動スクリプト

使用方法:
    python main.py [TIME]

例:
    python main.py
    python main.py 2.5
    python main.py --config configs/default.yaml
"""

from mcreversi.cli import main


if __name__ == "__main__":
    raise SystemExit(main())

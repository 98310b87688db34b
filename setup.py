"""mcreversi パッケージのインストールスクリプト

使用方法:
    pip install -e .
    pip install -e ".[test]"
    python main.py [TIME]
"""

from setuptools import find_packages, setup

setup(
    name="mcreversi",
    version="0.1.0",
    description="Othello AI using Monte Carlo Tree Search with random playouts",
    packages=find_packages(include=["mcreversi", "mcreversi.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
)

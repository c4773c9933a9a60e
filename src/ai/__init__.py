"""
ダマAI - パッケージ初期化
"""

from .evaluator import evaluate
from .search import DamaAI, get_best_move

__all__ = [
    'evaluate',
    'DamaAI',
    'get_best_move',
]

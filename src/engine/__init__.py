"""
ダマのゲームエンジン - パッケージ初期化
"""

from .piece import Piece, Player, Orientation
from .board import Board, BOARD_SIZE
from .move import Move, Step
from .move_generator import MoveGenerator
from .rules import Rules, GameResult, TerminationReason, DRAW_PLY_THRESHOLD
from .game import GameState, TurnPhase
from .errors import (
    DamaError,
    DesynchronizedMoveError,
    IllegalMoveError,
    GameOverError,
    InvalidSnapshotError,
    SearchCancelled,
)

__all__ = [
    'Piece',
    'Player',
    'Orientation',
    'Board',
    'BOARD_SIZE',
    'Move',
    'Step',
    'MoveGenerator',
    'Rules',
    'GameResult',
    'TerminationReason',
    'DRAW_PLY_THRESHOLD',
    'GameState',
    'TurnPhase',
    'DamaError',
    'DesynchronizedMoveError',
    'IllegalMoveError',
    'GameOverError',
    'InvalidSnapshotError',
    'SearchCancelled',
]

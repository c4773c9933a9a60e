"""
ミニマックス（アルファベータ枝刈り）による手の選択

難易度レベル:
- easy: 深さ2、候補手をシャッフル
- medium: 深さ4、候補手をシャッフル
- hard: 深さ6、生成順のまま評価

各再帰は独立にコピーした盤面の上で行い、兄弟の分岐で盤面を共有しない。
停止イベント（threading.Event）がセットされると次のノードで
SearchCancelled を送出する。
"""

import logging
import math
import threading
from typing import List, Optional

import numpy as np

from ..engine.board import Board
from ..engine.errors import SearchCancelled
from ..engine.game import GameState, TurnPhase
from ..engine.move import Move
from ..engine.move_generator import MoveGenerator
from ..engine.piece import Orientation, Player
from ..engine.rules import Rules
from .evaluator import evaluate

logger = logging.getLogger(__name__)


class DamaAI:
    """ダマAI - ミニマックス + アルファベータ枝刈り"""

    DIFFICULTY_SETTINGS = {
        'easy': {'depth': 2, 'shuffle': True},
        'medium': {'depth': 4, 'shuffle': True},
        'hard': {'depth': 6, 'shuffle': False},
    }

    def __init__(
        self,
        difficulty: str = 'medium',
        orientation: Optional[Orientation] = None,
        seed: Optional[int] = None,
        stop_event: Optional[threading.Event] = None
    ):
        """
        Args:
            difficulty: 'easy', 'medium', 'hard'
            orientation: 盤の向き（Noneなら人間側を下にした向き）
            seed: シャッフル用乱数のシード
            stop_event: セットされたら探索を中断する
        """
        if difficulty not in self.DIFFICULTY_SETTINGS:
            raise ValueError(f"Unknown difficulty: {difficulty}")

        settings = self.DIFFICULTY_SETTINGS[difficulty]
        self.difficulty = difficulty
        self.depth = settings['depth']
        self.shuffle = settings['shuffle']
        self.orientation = orientation
        self.rng = np.random.default_rng(seed)
        self.stop_event = stop_event
        self.nodes = 0

    def _resolve_orientation(self, human_player: Player, orientation: Optional[Orientation]) -> Orientation:
        if orientation is not None:
            return orientation
        if self.orientation is not None:
            return self.orientation
        return Orientation.with_bottom(human_player)

    def get_best_move(
        self,
        board: Board,
        ai_player: Player,
        human_player: Player,
        orientation: Optional[Orientation] = None
    ) -> Optional[Move]:
        """
        最善手を取得

        Returns:
            最善手。合法手がない、または既に終局している局面ならNone
        """
        orientation = self._resolve_orientation(human_player, orientation)
        if Rules.check_termination(board, ai_player, orientation) is not None:
            return None
        moves = MoveGenerator.all_moves(board, ai_player, orientation)
        return self._choose(board, moves, ai_player, human_player, orientation)

    def choose_continuation(
        self,
        board: Board,
        piece_id: int,
        ai_player: Player,
        human_player: Player,
        orientation: Optional[Orientation] = None
    ) -> Optional[Move]:
        """連続取りの続きを、その駒の続きの手だけから選ぶ"""
        orientation = self._resolve_orientation(human_player, orientation)
        moves = Rules.chain_continuations(board, piece_id, orientation)
        return self._choose(board, moves, ai_player, human_player, orientation)

    def play_turn(self, game: GameState) -> List[Move]:
        """
        AIの手番を最後まで指す

        連続取りが残っている間は同じ探索で続きを選び、途中で手番を渡さない。
        返り値: 実際に指した手のリスト（合法手がなければ空）
        """
        if game.game_over:
            return []

        ai_player = game.current_player
        human_player = ai_player.opponent
        played: List[Move] = []

        while not game.game_over and game.current_player == ai_player:
            if game.phase == TurnPhase.CHAIN_CONTINUATION:
                move = self.choose_continuation(
                    game.board, game.chain_piece_id, ai_player, human_player, game.orientation
                )
            elif played:
                break
            else:
                move = self.get_best_move(game.board, ai_player, human_player, game.orientation)

            if move is None:
                break
            game.play(move)
            played.append(move)

        return played

    def _choose(
        self,
        board: Board,
        moves: List[Move],
        ai_player: Player,
        human_player: Player,
        orientation: Orientation
    ) -> Optional[Move]:
        """候補手を1手ずつ適用してミニマックスで採点し、最高点の最初の手を返す"""
        if not moves:
            return None

        if self.shuffle:
            moves = [moves[i] for i in self.rng.permutation(len(moves))]

        self.nodes = 0
        best_move = None
        best_score = -math.inf

        for move in moves:
            child = Rules.apply_move(board, move, orientation)
            score = self.minimax(
                child, self.depth - 1, -math.inf, math.inf, False,
                ai_player, human_player, orientation
            )
            if best_move is None or score > best_score:
                best_score = score
                best_move = move

        logger.debug(
            "%s AI chose %s (score=%s, candidates=%d, nodes=%d)",
            self.difficulty, best_move, best_score, len(moves), self.nodes
        )
        return best_move

    def minimax(
        self,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
        ai_player: Player,
        human_player: Player,
        orientation: Optional[Orientation] = None
    ) -> float:
        """ミニマックス + アルファベータ枝刈り（AI視点の評価値を返す）"""
        if self.stop_event is not None and self.stop_event.is_set():
            raise SearchCancelled("Search was cancelled")
        self.nodes += 1

        orientation = self._resolve_orientation(human_player, orientation)
        ai_moves = MoveGenerator.all_moves(board, ai_player, orientation)
        human_moves = MoveGenerator.all_moves(board, human_player, orientation)

        # 駒がない側は合法手もないので、ここで両方の終了条件を見ている
        if depth == 0 or not ai_moves or not human_moves:
            return evaluate(
                board, ai_player, human_player, orientation,
                ai_has_moves=bool(ai_moves),
                human_has_moves=bool(human_moves),
            )

        if maximizing:
            max_eval = -math.inf
            for move in ai_moves:
                child = Rules.apply_move(board, move, orientation)
                evaluation = self.minimax(
                    child, depth - 1, alpha, beta, False, ai_player, human_player, orientation
                )
                max_eval = max(max_eval, evaluation)
                alpha = max(alpha, evaluation)
                if beta <= alpha:
                    break  # βカット
            return max_eval

        min_eval = math.inf
        for move in human_moves:
            child = Rules.apply_move(board, move, orientation)
            evaluation = self.minimax(
                child, depth - 1, alpha, beta, True, ai_player, human_player, orientation
            )
            min_eval = min(min_eval, evaluation)
            beta = min(beta, evaluation)
            if beta <= alpha:
                break  # αカット
        return min_eval

    def evaluate_position(
        self,
        board: Board,
        ai_player: Player,
        human_player: Player,
        orientation: Optional[Orientation] = None
    ) -> float:
        """局面を評価（正の値: AI有利）"""
        orientation = self._resolve_orientation(human_player, orientation)
        return evaluate(board, ai_player, human_player, orientation)


def get_best_move(
    board: Board,
    ai_player: Player,
    human_player: Player,
    difficulty: str = 'medium',
    orientation: Optional[Orientation] = None,
    seed: Optional[int] = None,
    stop_event: Optional[threading.Event] = None
) -> Optional[Move]:
    """難易度を指定して最善手を1つ返す（合法手がなければNone）"""
    ai = DamaAI(difficulty, orientation=orientation, seed=seed, stop_event=stop_event)
    return ai.get_best_move(board, ai_player, human_player)

"""
ダマのルール判定を行うモジュール
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .board import Board
from .errors import DesynchronizedMoveError
from .move import Move
from .move_generator import MoveGenerator
from .piece import Orientation, Player

logger = logging.getLogger(__name__)

# 王だけになってから、取りも兵の移動もないまま続いたら引き分けにする手数（プライ）
DRAW_PLY_THRESHOLD = 40


class TerminationReason(Enum):
    """ゲーム終了の理由"""
    ELIMINATION = auto()     # 駒が全滅
    NO_LEGAL_MOVES = auto()  # 手番側に合法手がない（この変種では負け）
    REPETITION = auto()      # 王同士で進展なし（引き分け）
    FORFEIT = auto()         # 投了


@dataclass(frozen=True)
class GameResult:
    """ゲーム結果（winnerがNoneなら引き分け）"""
    winner: Optional[Player]
    reason: TerminationReason

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def to_dict(self) -> dict:
        return {
            "winner": self.winner.value if self.winner else "draw",
            "reason": self.reason.name,
        }


class Rules:
    """ダマのルールを管理するクラス"""

    @staticmethod
    def apply_move(board: Board, move: Move, orientation: Orientation) -> Board:
        """
        盤面に手を適用した新しい盤面を返す（元の盤面は変更しない）

        - 動かす駒を元のマスから取り除く
        - 取った駒をすべて取り除く
        - 経路をたどって位置を更新し、初めて成り段に着いた時点で王にする
        - 最終マスに駒を置く

        駒IDが盤面上に見つからない、または手が示すマスにその駒がなければ
        DesynchronizedMoveError を送出する。
        元の盤面をそのまま返して手番を黙って落とすことはしない。
        """
        new_board = board.copy()

        piece = new_board.find_piece(move.piece_id)
        if piece is None:
            logger.warning("apply_move: piece %s not found for %s", move.piece_id, move)
            raise DesynchronizedMoveError(move.piece_id)
        if piece.owner != move.player:
            raise DesynchronizedMoveError(
                move.piece_id,
                f"Piece id {move.piece_id} belongs to {piece.owner.name}, not {move.player.name}",
            )
        if piece.position != tuple(move.from_pos):
            logger.warning(
                "apply_move: piece %s is at %s, not %s", move.piece_id, piece.position, move.from_pos
            )
            raise DesynchronizedMoveError(
                move.piece_id,
                f"Piece id {move.piece_id} is at {piece.position}, not {move.from_pos}",
            )

        new_board.remove_piece(piece.position)
        promotion_row = orientation.promotion_row(piece.owner, new_board.size)

        for step in move.path:
            if step.is_capture:
                captured = new_board.find_piece(step.captured_id)
                if captured is None:
                    logger.warning(
                        "apply_move: captured piece %s not found for %s", step.captured_id, move
                    )
                    raise DesynchronizedMoveError(step.captured_id)
                if captured.position != tuple(step.captured_pos):
                    raise DesynchronizedMoveError(
                        step.captured_id,
                        f"Captured piece id {step.captured_id} is at {captured.position}, "
                        f"not {step.captured_pos}",
                    )
                new_board.remove_piece(captured.position)

            piece.row, piece.col = step.to_pos
            if not piece.is_king and piece.row == promotion_row:
                piece.promote()

        if not new_board.add_piece(piece):
            raise DesynchronizedMoveError(
                move.piece_id,
                f"Destination {move.to_pos} is not free for piece id {move.piece_id}",
            )

        return new_board

    @staticmethod
    def chain_continuations(board: Board, piece_id: int, orientation: Orientation) -> List[Move]:
        """
        取りの直後、同じ駒がさらに取れる手（最多取りのものだけ）
        空ならチェーンは終わりで手番が交代する
        """
        piece = board.find_piece(piece_id)
        if piece is None:
            return []
        chains = MoveGenerator.capture_chains(board, piece, orientation)
        return MoveGenerator.longest_captures(chains)

    @staticmethod
    def only_kings_remain(board: Board) -> bool:
        """両者とも兵がなく王だけか"""
        return all(piece.is_king for piece in board.pieces())

    @staticmethod
    def is_game_over_for(board: Board, player: Player, orientation: Orientation) -> bool:
        """指定プレイヤーが駒なし、または合法手なしか"""
        if board.count_pieces(player) == 0:
            return True
        return not MoveGenerator.has_any_move(board, player, orientation)

    @staticmethod
    def check_termination(
        board: Board,
        player_to_move: Player,
        orientation: Orientation,
        quiet_plies: int = 0
    ) -> Optional[GameResult]:
        """
        ゲームが終了したか確認

        1. どちらかの駒が0なら相手の勝ち（ELIMINATION）
        2. 手番側に駒があるのに合法手がなければ手番側の負け（NO_LEGAL_MOVES）
        3. 両者とも王だけで、進展のないプライ数が閾値に達したら引き分け（REPETITION）

        quiet_plies: 最後の取り・兵の移動からのプライ数
        """
        for player in Player:
            if board.count_pieces(player) == 0:
                return GameResult(player.opponent, TerminationReason.ELIMINATION)

        if not MoveGenerator.has_any_move(board, player_to_move, orientation):
            return GameResult(player_to_move.opponent, TerminationReason.NO_LEGAL_MOVES)

        if Rules.only_kings_remain(board) and quiet_plies >= DRAW_PLY_THRESHOLD:
            return GameResult(None, TerminationReason.REPETITION)

        return None

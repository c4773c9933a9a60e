"""
局面評価関数

駒得と前進度だけを見る単純な評価。強さは主に探索の深さで決まる。
"""

import math
from typing import Optional

from ..engine.board import Board
from ..engine.move_generator import MoveGenerator
from ..engine.piece import Orientation, Player

PIECE_VALUE = 10
KING_BONUS = 15
KING_BALANCE_WEIGHT = 5
PIECE_BALANCE_WEIGHT = 2


def advancement(row: int, player: Player, orientation: Orientation, board_size: int) -> int:
    """成り段に向かってどれだけ進んだか（行0に向かう側は size-1-row、逆側は row）"""
    if orientation.forward(player) == -1:
        return board_size - 1 - row
    return row


def evaluate(
    board: Board,
    ai_player: Player,
    human_player: Player,
    orientation: Orientation,
    ai_has_moves: Optional[bool] = None,
    human_has_moves: Optional[bool] = None
) -> float:
    """
    AI視点の評価値を返す

    - 人間側の駒が0、または合法手が0なら +inf
    - AI側が同じ状態なら -inf
    - それ以外は有限値:
      駒1つにつき ±10、王なら さらに ±15、前進度、
      (AIの王 - 人間の王) * 5 + (AIの駒 - 人間の駒) * 2

    ai_has_moves / human_has_moves: 探索側で計算済みなら渡す（再計算を省く）
    """
    score = 0
    ai_pieces = ai_kings = 0
    human_pieces = human_kings = 0

    for piece in board.pieces():
        if piece.owner == ai_player:
            sign = 1
            ai_pieces += 1
            if piece.is_king:
                ai_kings += 1
        elif piece.owner == human_player:
            sign = -1
            human_pieces += 1
            if piece.is_king:
                human_kings += 1
        else:
            continue

        value = PIECE_VALUE
        if piece.is_king:
            value += KING_BONUS
        value += advancement(piece.row, piece.owner, orientation, board.size)
        score += sign * value

    if human_pieces == 0:
        return math.inf
    if ai_pieces == 0:
        return -math.inf

    if ai_has_moves is None:
        ai_has_moves = MoveGenerator.has_any_move(board, ai_player, orientation)
    if not ai_has_moves:
        return -math.inf

    if human_has_moves is None:
        human_has_moves = MoveGenerator.has_any_move(board, human_player, orientation)
    if not human_has_moves:
        return math.inf

    score += (ai_kings - human_kings) * KING_BALANCE_WEIGHT
    score += (ai_pieces - human_pieces) * PIECE_BALANCE_WEIGHT
    return float(score)

"""
初期盤面の設定とユーティリティ
"""

from typing import Iterable, Tuple

from .board import BOARD_SIZE, Board
from .piece import Orientation, Piece, Player

# 各プレイヤーが駒を並べる段数
ROWS_PER_SIDE = 3


def is_dark_square(row: int, col: int) -> bool:
    """駒を置く暗いマスか（(row + col) が奇数）"""
    return (row + col) % 2 == 1


def load_initial_board(
    orientation: Orientation = Orientation.RED_BOTTOM,
    size: int = BOARD_SIZE
) -> Board:
    """
    標準の初期盤面を作る
    下側のプレイヤーは下3段、上側のプレイヤーは上3段の暗いマスに並べる
    駒IDは行優先で0から振る
    """
    board = Board(size)
    bottom = orientation.bottom_player
    top = bottom.opponent

    next_id = 0
    for row in range(size):
        if row < ROWS_PER_SIDE:
            owner = top
        elif row >= size - ROWS_PER_SIDE:
            owner = bottom
        else:
            continue
        for col in range(size):
            if is_dark_square(row, col):
                board.add_piece(Piece(next_id, owner, row, col))
                next_id += 1

    return board


def board_from_pieces(
    placements: Iterable[Tuple[int, int, Player, bool]],
    size: int = BOARD_SIZE
) -> Board:
    """
    (row, col, player, is_king) のリストから盤面を作る
    局面の再現やテスト用。駒IDは並び順に0から振る
    """
    board = Board(size)
    for piece_id, (row, col, player, is_king) in enumerate(placements):
        if not board.add_piece(Piece(piece_id, player, row, col, is_king)):
            raise ValueError(f"Cannot place piece at ({row}, {col})")
    return board

"""
ダマの合法手生成モジュール

単純移動、飛び王のスライド、連続取り（チェーン）の全列挙と、
「最多取りが義務」のフィルタを行う。ルール判定と探索エンジンの両方が
このモジュールだけを使う。
"""

from typing import FrozenSet, List, Tuple

from .board import Board, Position
from .move import Move, Step
from .piece import Orientation, Piece, Player

# 斜め4方向
DIAGONALS: Tuple[Tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class MoveGenerator:
    """合法手を生成するクラス"""

    @staticmethod
    def simple_moves(board: Board, piece: Piece, orientation: Orientation) -> List[Move]:
        """
        駒を取らない移動を列挙

        - 兵: 前進方向の斜め1マスの空マス
        - 王: 斜め4方向に、最初の駒または盤端の手前までの空マスすべて
        """
        moves = []
        promotion_row = orientation.promotion_row(piece.owner, board.size)

        if piece.is_king:
            for dr, dc in DIAGONALS:
                row, col = piece.row + dr, piece.col + dc
                while board.is_empty((row, col)):
                    moves.append(Move(
                        piece.piece_id,
                        piece.owner,
                        [Step(piece.position, (row, col))],
                    ))
                    row, col = row + dr, col + dc
        else:
            dr = orientation.forward(piece.owner)
            for dc in (-1, 1):
                target = (piece.row + dr, piece.col + dc)
                if board.is_empty(target):
                    moves.append(Move(
                        piece.piece_id,
                        piece.owner,
                        [Step(piece.position, target)],
                        promotes=target[0] == promotion_row,
                    ))

        return moves

    @staticmethod
    def capture_chains(board: Board, piece: Piece, orientation: Orientation) -> List[Move]:
        """
        駒の連続取りをすべて列挙（深さ優先）

        同じチェーン内で一度取った駒は二度と取れない。取った駒のIDを集合で
        管理し、ジャンプの前に必ず確認する。各分岐は盤面のコピー上で
        取った駒を取り除いてから再帰する。
        """
        return MoveGenerator._extend_chain(
            board, piece.copy(), piece, orientation, [], frozenset()
        )

    @staticmethod
    def _extend_chain(
        board: Board,
        current: Piece,
        origin: Piece,
        orientation: Orientation,
        path: List[Step],
        captured_ids: FrozenSet[int]
    ) -> List[Move]:
        chains = []
        promotion_row = orientation.promotion_row(origin.owner, board.size)
        found_capture = False

        for dr, dc in DIAGONALS:
            for jumped, landing in MoveGenerator._jumps(board, current, dr, dc, captured_ids):
                found_capture = True

                next_board = board.copy()
                next_board.remove_piece(jumped.position)
                moved = next_board.find_piece(current.piece_id)
                next_board.move_piece(moved, landing)
                if landing[0] == promotion_row:
                    moved.promote()

                step = Step(current.position, landing, jumped.position, jumped.piece_id)
                chains.extend(MoveGenerator._extend_chain(
                    next_board,
                    moved,
                    origin,
                    orientation,
                    path + [step],
                    captured_ids | {jumped.piece_id},
                ))

        if not found_capture and path:
            chains.append(Move(
                origin.piece_id,
                origin.owner,
                path,
                promotes=not origin.is_king and current.row == promotion_row,
            ))

        return chains

    @staticmethod
    def _jumps(
        board: Board,
        piece: Piece,
        dr: int,
        dc: int,
        captured_ids: FrozenSet[int]
    ) -> List[Tuple[Piece, Position]]:
        """
        1方向への1回分のジャンプ候補 (取る駒, 着地マス) を返す

        王は方向に沿って進み、最初に出会った駒で結果が決まる。
        まだ取っていない敵駒なら、その先の空マスすべてが着地候補になる。
        味方や取り済みの駒なら、その方向は塞がれている。
        """
        if piece.is_king:
            row, col = piece.row + dr, piece.col + dc
            while board.is_empty((row, col)):
                row, col = row + dr, col + dc
            if not board.is_valid_position((row, col)):
                return []
            target = board.get_piece((row, col))
        else:
            row, col = piece.row + dr, piece.col + dc
            if not board.is_valid_position((row, col)):
                return []
            target = board.get_piece((row, col))
            if target is None:
                return []

        if target.owner == piece.owner or target.piece_id in captured_ids:
            return []

        landings = []
        land_row, land_col = row + dr, col + dc
        while board.is_empty((land_row, land_col)):
            landings.append((target, (land_row, land_col)))
            if not piece.is_king:
                break
            land_row, land_col = land_row + dr, land_col + dc
        return landings

    @staticmethod
    def longest_captures(chains: List[Move]) -> List[Move]:
        """取る駒数が最大のチェーンだけを残す（同数はすべて合法）"""
        if not chains:
            return []
        most = max(chain.capture_count for chain in chains)
        return [chain for chain in chains if chain.capture_count == most]

    @staticmethod
    def all_moves(board: Board, player: Player, orientation: Orientation) -> List[Move]:
        """
        指定プレイヤーの合法手をすべて取得

        どこかで駒を取れるなら、全駒を通じて最多取りのチェーンだけが合法。
        取りが一つもなければ単純移動がすべて合法。
        """
        captures = []
        simple = []

        for piece in list(board.pieces(player)):
            chains = MoveGenerator.capture_chains(board, piece, orientation)
            if chains:
                captures.extend(chains)
            elif not captures:
                simple.extend(MoveGenerator.simple_moves(board, piece, orientation))

        if captures:
            return MoveGenerator.longest_captures(captures)
        return simple

    @staticmethod
    def piece_moves(board: Board, piece_id: int, orientation: Orientation) -> List[Move]:
        """
        指定駒の合法手（手番側の合法手集合のうち、その駒が動くもの）
        駒の選択時にハイライトするマスを得るのに使う
        """
        piece = board.find_piece(piece_id)
        if piece is None:
            return []
        return [
            move for move in MoveGenerator.all_moves(board, piece.owner, orientation)
            if move.piece_id == piece_id
        ]

    @staticmethod
    def has_any_move(board: Board, player: Player, orientation: Orientation) -> bool:
        """合法手が1つでもあるか"""
        return bool(MoveGenerator.all_moves(board, player, orientation))

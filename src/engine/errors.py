"""
ダマエンジンの例外定義

盤外座標は例外ではなく列挙時に黙って除外される。
合法手なし（NO_LEGAL_MOVES）は GameResult で表し、例外にはしない。
"""


class DamaError(Exception):
    """エンジン共通の基底例外"""


class DesynchronizedMoveError(DamaError):
    """手が参照する駒IDが盤面上に見つからない（盤面と手の同期ずれ）"""

    def __init__(self, piece_id: int, message: str = None):
        self.piece_id = piece_id
        super().__init__(message or f"Piece id {piece_id} is not on the board")


class IllegalMoveError(DamaError):
    """現在の合法手集合に含まれない手"""


class GameOverError(DamaError):
    """終了済みのゲームに対する操作"""


class InvalidSnapshotError(DamaError, ValueError):
    """盤面スナップショットの形式が不正"""


class SearchCancelled(DamaError):
    """停止イベントにより探索が中断された"""

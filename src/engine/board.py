"""
ダマの盤面を管理するモジュール
"""

from typing import Iterator, List, Optional, Tuple

from .errors import InvalidSnapshotError
from .piece import Piece, Player

# 盤面サイズ
BOARD_SIZE = 8

Position = Tuple[int, int]


class Board:
    """
    ダマのゲームボードを表すクラス

    各マスには駒が最大1つ。駒オブジェクトはこの盤面だけが所有し、
    探索の各分岐では copy() した独立の盤面を使う。
    """

    def __init__(self, size: int = BOARD_SIZE):
        self.size = size
        self.grid: List[List[Optional[Piece]]] = [
            [None for _ in range(size)]
            for _ in range(size)
        ]

    def is_valid_position(self, position: Position) -> bool:
        """位置が盤面内か確認"""
        row, col = position
        return 0 <= row < self.size and 0 <= col < self.size

    def get_piece(self, position: Position) -> Optional[Piece]:
        """指定位置の駒を取得"""
        if not self.is_valid_position(position):
            raise ValueError(f"Invalid position: {position}")
        row, col = position
        return self.grid[row][col]

    def is_empty(self, position: Position) -> bool:
        """指定位置が空マスか確認（盤外はFalse）"""
        if not self.is_valid_position(position):
            return False
        row, col = position
        return self.grid[row][col] is None

    def add_piece(self, piece: Piece) -> bool:
        """
        駒を自身の(row, col)に配置
        返り値: 成功したらTrue（盤外・既に駒がある場合はFalse）
        """
        if not self.is_empty(piece.position):
            return False
        self.grid[piece.row][piece.col] = piece
        return True

    def remove_piece(self, position: Position) -> Optional[Piece]:
        """指定位置の駒を取り除いて返す"""
        piece = self.get_piece(position)
        if piece is not None:
            row, col = position
            self.grid[row][col] = None
        return piece

    def move_piece(self, piece: Piece, to_pos: Position):
        """駒を空マスへ移動する（途中経路は見ない）"""
        self.grid[piece.row][piece.col] = None
        piece.row, piece.col = to_pos
        self.grid[piece.row][piece.col] = piece

    def find_piece(self, piece_id: int) -> Optional[Piece]:
        """IDから駒を探す"""
        for piece in self.pieces():
            if piece.piece_id == piece_id:
                return piece
        return None

    def pieces(self, player: Optional[Player] = None) -> Iterator[Piece]:
        """盤上の駒を行優先で列挙（playerを指定するとその色だけ）"""
        for row in self.grid:
            for piece in row:
                if piece is not None and (player is None or piece.owner == player):
                    yield piece

    def count_pieces(self, player: Player) -> int:
        return sum(1 for _ in self.pieces(player))

    def count_kings(self, player: Player) -> int:
        return sum(1 for piece in self.pieces(player) if piece.is_king)

    def copy(self) -> 'Board':
        """盤面のコピーを作成（駒もすべて複製する）"""
        new_board = Board(self.size)
        for piece in self.pieces():
            new_board.add_piece(piece.copy())
        return new_board

    def to_snapshot(self) -> List[List[Optional[str]]]:
        """外部表現（'R', 'RK', 'B', 'BK' / None のグリッド）に変換。IDは捨てる"""
        return [
            [piece.to_token() if piece else None for piece in row]
            for row in self.grid
        ]

    @staticmethod
    def from_snapshot(snapshot: List[List[Optional[str]]]) -> 'Board':
        """
        外部表現から盤面を復元する
        駒IDは行優先で0から振り直す（セッション内でのみ有効）
        """
        size = len(snapshot)
        if size == 0 or any(len(row) != size for row in snapshot):
            raise InvalidSnapshotError("Snapshot must be a non-empty square grid")

        board = Board(size)
        next_id = 0
        for row, cells in enumerate(snapshot):
            for col, token in enumerate(cells):
                if not token:
                    continue
                if token not in ('R', 'RK', 'B', 'BK'):
                    raise InvalidSnapshotError(f"Invalid piece token at ({row}, {col}): {token!r}")
                piece = Piece(
                    next_id,
                    Player.from_letter(token[0]),
                    row,
                    col,
                    is_king=token.endswith('K'),
                )
                board.add_piece(piece)
                next_id += 1
        return board

    def to_dict(self) -> dict:
        """盤面を辞書形式に変換（API用）"""
        return {
            "size": self.size,
            "board": self.to_snapshot(),
            "pieces": {
                player.value: self.count_pieces(player)
                for player in Player
            },
        }

    def __str__(self):
        """盤面の文字列表現を返す"""
        result = ["   " + " ".join(str(i) for i in range(self.size))]
        for row in range(self.size):
            cells = []
            for col in range(self.size):
                piece = self.grid[row][col]
                if piece is not None:
                    cells.append(str(piece))
                else:
                    cells.append('.' if (row + col) % 2 else ' ')
            result.append(f"{row} |" + " ".join(cells))
        return "\n".join(result)

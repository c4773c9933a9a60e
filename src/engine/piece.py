"""
ダマの駒・プレイヤー・盤の向きを定義するモジュール
"""

from enum import Enum, auto
from typing import Tuple


class Player(Enum):
    """プレイヤーの定義"""
    RED = 'red'    # 先手（赤）
    BLUE = 'blue'  # 後手（青）

    @property
    def opponent(self):
        """相手プレイヤーを返す"""
        return Player.BLUE if self == Player.RED else Player.RED

    @property
    def letter(self) -> str:
        """スナップショット用の1文字表記（'R' / 'B'）"""
        return 'R' if self == Player.RED else 'B'

    @staticmethod
    def from_letter(letter: str) -> 'Player':
        """'R' / 'B' からプレイヤーを復元"""
        for player in Player:
            if player.letter == letter:
                return player
        raise ValueError(f"Invalid player letter: {letter}")


class Orientation(Enum):
    """
    盤の向き（どちらの色が下側にいて行0に向かって進むか）

    前進方向と成り段はすべて (駒の色, 向き) だけから決まる。
    画面上でどちらの人間が下にいるかという暗黙の状態には依存しない。
    """
    RED_BOTTOM = auto()
    BLUE_BOTTOM = auto()

    @property
    def bottom_player(self) -> Player:
        """下側（行0に向かって進む）のプレイヤー"""
        return Player.RED if self == Orientation.RED_BOTTOM else Player.BLUE

    @staticmethod
    def with_bottom(player: Player) -> 'Orientation':
        """指定プレイヤーを下側にした向きを返す"""
        return Orientation.RED_BOTTOM if player == Player.RED else Orientation.BLUE_BOTTOM

    def forward(self, player: Player) -> int:
        """
        駒の前進方向（行の増分）
        下側のプレイヤーは -1（上へ）、上側のプレイヤーは +1（下へ）
        """
        return -1 if player == self.bottom_player else 1

    def promotion_row(self, player: Player, board_size: int) -> int:
        """成り段（下側のプレイヤーは行0、上側は最終行）"""
        return 0 if player == self.bottom_player else board_size - 1


class Piece:
    """ダマの駒を表すクラス"""

    def __init__(self, piece_id: int, owner: Player, row: int, col: int, is_king: bool = False):
        self.piece_id = piece_id
        self.owner = owner
        self.row = row
        self.col = col
        self.is_king = is_king

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def promote(self):
        """成る（一度成った駒は元に戻らない）"""
        self.is_king = True

    def copy(self) -> 'Piece':
        return Piece(self.piece_id, self.owner, self.row, self.col, self.is_king)

    def to_token(self) -> str:
        """スナップショット用のトークン（例: 'R', 'RK', 'B', 'BK'）"""
        return self.owner.letter + ('K' if self.is_king else '')

    def __eq__(self, other):
        if not isinstance(other, Piece):
            return NotImplemented
        return (
            self.piece_id == other.piece_id
            and self.owner == other.owner
            and self.position == other.position
            and self.is_king == other.is_king
        )

    def __hash__(self):
        return hash((self.piece_id, self.owner, self.row, self.col, self.is_king))

    def __str__(self):
        """駒の文字列表現（例: 'r', 'R'=赤の王, 'b', 'B'=青の王）"""
        letter = self.owner.letter
        return letter if self.is_king else letter.lower()

    def __repr__(self):
        return (
            f"Piece(id={self.piece_id}, {self.owner.name}, "
            f"({self.row}, {self.col}), king={self.is_king})"
        )

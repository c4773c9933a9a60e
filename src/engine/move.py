"""
ダマの手（Move）を表現するモジュール
"""

from typing import FrozenSet, Iterable, List, Optional, Tuple

from .piece import Player

Position = Tuple[int, int]


class Step:
    """手の中の1区間（1回の移動または1回のジャンプ）"""

    def __init__(
        self,
        from_pos: Position,
        to_pos: Position,
        captured_pos: Optional[Position] = None,
        captured_id: Optional[int] = None
    ):
        self.from_pos = from_pos
        self.to_pos = to_pos
        self.captured_pos = captured_pos  # 取った駒の位置（移動だけならNone）
        self.captured_id = captured_id

    @property
    def is_capture(self) -> bool:
        return self.captured_id is not None

    def __eq__(self, other):
        if not isinstance(other, Step):
            return NotImplemented
        return (
            self.from_pos == other.from_pos
            and self.to_pos == other.to_pos
            and self.captured_pos == other.captured_pos
            and self.captured_id == other.captured_id
        )

    def __hash__(self):
        return hash((self.from_pos, self.to_pos, self.captured_pos, self.captured_id))

    def __repr__(self):
        if self.is_capture:
            return f"Step({self.from_pos} x{self.captured_pos} -> {self.to_pos})"
        return f"Step({self.from_pos} -> {self.to_pos})"

    def to_dict(self) -> dict:
        return {
            "from": list(self.from_pos),
            "to": list(self.to_pos),
            "captured": list(self.captured_pos) if self.captured_pos else None,
        }


class Move:
    """ダマの一手を表すクラス（単純移動、または連続取りの全経路）"""

    def __init__(
        self,
        piece_id: int,
        player: Player,
        path: Iterable[Step],
        promotes: bool = False
    ):
        self.piece_id = piece_id
        self.player = player
        self.path: List[Step] = list(path)
        if not self.path:
            raise ValueError("Move path must contain at least one step")
        self.captured_ids: FrozenSet[int] = frozenset(
            step.captured_id for step in self.path if step.is_capture
        )
        self.promotes = promotes

    @property
    def from_pos(self) -> Position:
        return self.path[0].from_pos

    @property
    def to_pos(self) -> Position:
        """最終到達マス"""
        return self.path[-1].to_pos

    @property
    def is_capture(self) -> bool:
        return bool(self.captured_ids)

    @property
    def capture_count(self) -> int:
        return len(self.captured_ids)

    @property
    def captured_positions(self) -> List[Position]:
        return [step.captured_pos for step in self.path if step.is_capture]

    def __eq__(self, other):
        if not isinstance(other, Move):
            return NotImplemented
        return (
            self.piece_id == other.piece_id
            and self.player == other.player
            and self.path == other.path
        )

    def __hash__(self):
        return hash((self.piece_id, self.player, tuple(self.path)))

    def __str__(self):
        if self.is_capture:
            captures = ", ".join(str(pos) for pos in self.captured_positions)
            return f"{self.player.name} {self.from_pos} -> {self.to_pos} (x {captures})"
        return f"{self.player.name} {self.from_pos} -> {self.to_pos}"

    def __repr__(self):
        return (
            f"Move(piece={self.piece_id}, player={self.player.name}, "
            f"path={self.path}, promotes={self.promotes})"
        )

    def to_interchange(self) -> dict:
        """
        外部との手のやり取り形式に変換
        端点と取った駒の座標だけを持ち、途中経路は含まない
        """
        return {
            "from": list(self.from_pos),
            "to": list(self.to_pos),
            "captures": [list(pos) for pos in self.captured_positions],
        }

    def to_dict(self) -> dict:
        """手を辞書形式に変換（API用）"""
        data = self.to_interchange()
        data.update({
            "piece_id": self.piece_id,
            "player": self.player.name,
            "path": [step.to_dict() for step in self.path],
            "promotes": self.promotes,
        })
        return data

    def matches(
        self,
        from_pos: Position,
        to_pos: Position,
        captures: Optional[Iterable[Position]] = None
    ) -> bool:
        """外部形式の (from, to, captures) がこの手を指しているか"""
        if tuple(from_pos) != self.from_pos or tuple(to_pos) != self.to_pos:
            return False
        if captures is None:
            return True
        return {tuple(pos) for pos in captures} == set(self.captured_positions)

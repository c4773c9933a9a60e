"""
ダマの対局状態（手番・連続取り・終了判定）を管理するモジュール
"""

import logging
from enum import Enum, auto
from typing import Iterable, List, Optional

from .board import Board, Position
from .errors import GameOverError, IllegalMoveError
from .initial_setup import load_initial_board
from .move import Move
from .move_generator import MoveGenerator
from .piece import Orientation, Player
from .rules import GameResult, Rules, TerminationReason

logger = logging.getLogger(__name__)

# 待ったのために保持する履歴の最大数
MAX_HISTORY = 20


class TurnPhase(Enum):
    """手番の状態"""
    TO_MOVE = auto()             # 通常の手番
    CHAIN_CONTINUATION = auto()  # 同じ駒で取りを続けなければならない
    GAME_OVER = auto()


class GameState:
    """
    1局分の状態を管理するクラス

    盤面は play() でのみ更新する。Rules.apply_move が新しい盤面を返すので、
    以前の盤面はそのまま履歴として残せる。
    """

    def __init__(
        self,
        board: Optional[Board] = None,
        current_player: Player = Player.RED,
        orientation: Orientation = Orientation.RED_BOTTOM,
        quiet_plies: int = 0
    ):
        self.orientation = orientation
        self.board = board if board is not None else load_initial_board(orientation)
        self.current_player = current_player
        self.phase = TurnPhase.TO_MOVE
        self.chain_piece_id: Optional[int] = None
        self.quiet_plies = quiet_plies
        self.result: Optional[GameResult] = None
        self.move_history: List[Move] = []
        self._undo_stack: List[tuple] = []
        self.legal_moves: List[Move] = MoveGenerator.all_moves(
            self.board, self.current_player, self.orientation
        )
        self._check_game_end()

    @property
    def game_over(self) -> bool:
        return self.phase == TurnPhase.GAME_OVER

    @property
    def winner(self) -> Optional[Player]:
        return self.result.winner if self.result else None

    def is_legal(self, move: Move) -> bool:
        """
        合法手集合に含まれるか
        合法なチェーンの途中までの手（1ジャンプずつ指す場合）も受け付ける
        """
        for legal in self.legal_moves:
            if legal.piece_id != move.piece_id or legal.player != move.player:
                continue
            if legal.path[:len(move.path)] == move.path:
                return True
        return False

    def play(self, move: Move) -> Optional[GameResult]:
        """
        手を適用して状態を進める

        返り値: ゲームが終了した場合はその結果
        """
        if self.game_over:
            raise GameOverError("The game is already over")
        if move.player != self.current_player:
            raise IllegalMoveError(f"It is {self.current_player.name}'s turn, not {move.player.name}'s")
        if not self.is_legal(move):
            logger.warning("Rejected illegal move: %s", move)
            raise IllegalMoveError(f"Illegal move: {move}")

        moving_piece = self.board.find_piece(move.piece_id)
        was_pawn = moving_piece is not None and not moving_piece.is_king

        new_board = Rules.apply_move(self.board, move, self.orientation)
        self._push_history()
        self.board = new_board
        self.move_history.append(move)

        if move.is_capture or was_pawn:
            self.quiet_plies = 0
        else:
            self.quiet_plies += 1

        continuations = []
        if move.is_capture:
            continuations = Rules.chain_continuations(self.board, move.piece_id, self.orientation)

        if continuations:
            # 連続取り: 手番は交代しない
            self.phase = TurnPhase.CHAIN_CONTINUATION
            self.chain_piece_id = move.piece_id
            self.legal_moves = continuations
            logger.debug("Chain continues for piece %s (%d options)", move.piece_id, len(continuations))
        else:
            self.phase = TurnPhase.TO_MOVE
            self.chain_piece_id = None
            self.current_player = self.current_player.opponent
            self.legal_moves = MoveGenerator.all_moves(self.board, self.current_player, self.orientation)

        return self._check_game_end()

    def resolve_move(
        self,
        from_pos: Position,
        to_pos: Position,
        captures: Optional[Iterable[Position]] = None
    ) -> Move:
        """
        外部形式の手 {from, to, captures} を合法手に対応づける

        クライアントの手をそのまま信用せず、この盤面で生成した合法手と
        照合する。チェーンの途中までの指定も、経路の先頭部分として受け付ける。
        """
        if self.game_over:
            raise GameOverError("The game is already over")

        from_pos = tuple(from_pos)
        to_pos = tuple(to_pos)
        capture_list = None if captures is None else [tuple(pos) for pos in captures]

        candidates = [move for move in self.legal_moves if move.matches(from_pos, to_pos, capture_list)]
        if not candidates:
            candidates = self._matching_prefixes(from_pos, to_pos, capture_list)

        unique = list(dict.fromkeys(candidates))
        if not unique:
            raise IllegalMoveError(f"No legal move from {from_pos} to {to_pos}")
        if len(unique) > 1:
            raise IllegalMoveError(
                f"Move from {from_pos} to {to_pos} is ambiguous; specify the captures"
            )
        return unique[0]

    def _matching_prefixes(self, from_pos, to_pos, captures) -> List[Move]:
        """合法チェーンの先頭部分で (from, to, captures) に一致するもの"""
        prefixes = []
        for legal in self.legal_moves:
            if not legal.is_capture or legal.from_pos != from_pos:
                continue
            for length in range(1, len(legal.path)):
                partial = Move(legal.piece_id, legal.player, legal.path[:length])
                if partial.matches(from_pos, to_pos, captures):
                    prefixes.append(partial)
        return prefixes

    def resign(self, player: Player) -> GameResult:
        """投了（相手の勝ち）"""
        if self.game_over:
            raise GameOverError("The game is already over")
        self.result = GameResult(player.opponent, TerminationReason.FORFEIT)
        self.phase = TurnPhase.GAME_OVER
        self.legal_moves = []
        logger.info("%s resigned", player.name)
        return self.result

    def undo(self) -> bool:
        """1手戻す（履歴がなければFalse）"""
        if not self._undo_stack:
            return False
        (
            self.board,
            self.current_player,
            self.phase,
            self.chain_piece_id,
            self.quiet_plies,
            self.result,
            self.legal_moves,
        ) = self._undo_stack.pop()
        self.move_history.pop()
        return True

    def copy(self) -> 'GameState':
        """探索用のコピー（履歴は持たない）"""
        clone = GameState.__new__(GameState)
        clone.orientation = self.orientation
        clone.board = self.board.copy()
        clone.current_player = self.current_player
        clone.phase = self.phase
        clone.chain_piece_id = self.chain_piece_id
        clone.quiet_plies = self.quiet_plies
        clone.result = self.result
        clone.move_history = []
        clone._undo_stack = []
        clone.legal_moves = list(self.legal_moves)
        return clone

    def _push_history(self):
        self._undo_stack.append((
            self.board,
            self.current_player,
            self.phase,
            self.chain_piece_id,
            self.quiet_plies,
            self.result,
            self.legal_moves,
        ))
        if len(self._undo_stack) > MAX_HISTORY:
            self._undo_stack.pop(0)

    def _check_game_end(self) -> Optional[GameResult]:
        """遷移のたびに終了判定を行う"""
        result = Rules.check_termination(
            self.board, self.current_player, self.orientation, self.quiet_plies
        )
        if result is not None:
            self.result = result
            self.phase = TurnPhase.GAME_OVER
            self.legal_moves = []
            logger.info(
                "Game over: winner=%s reason=%s",
                result.winner.name if result.winner else "draw",
                result.reason.name,
            )
        return result

    def to_dict(self) -> dict:
        """ゲーム状態を辞書形式に変換"""
        return {
            "board": self.board.to_dict(),
            "orientation": self.orientation.name,
            "current_player": self.current_player.value,
            "phase": self.phase.name,
            "chain_piece_id": self.chain_piece_id,
            "quiet_plies": self.quiet_plies,
            "move_count": len(self.move_history),
            "game_over": self.game_over,
            "result": self.result.to_dict() if self.result else None,
        }

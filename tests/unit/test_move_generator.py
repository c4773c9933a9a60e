"""
ユニットテスト: 合法手生成（単純移動・連続取り・最多取り）
"""

import pytest
from src.engine import MoveGenerator, Player, Orientation
from src.engine.initial_setup import board_from_pieces


RED_BOTTOM = Orientation.RED_BOTTOM


def destinations(moves):
    return sorted(move.to_pos for move in moves)


class TestSimpleMoves:
    """単純移動のテストクラス"""

    def test_pawn_moves_forward_diagonally(self):
        """兵は前方の斜め1マスにだけ動ける"""
        board = board_from_pieces([
            (5, 2, Player.RED, False),
            (2, 3, Player.BLUE, False),
        ])
        red = board.get_piece((5, 2))
        blue = board.get_piece((2, 3))

        assert destinations(MoveGenerator.simple_moves(board, red, RED_BOTTOM)) == [(4, 1), (4, 3)]
        assert destinations(MoveGenerator.simple_moves(board, blue, RED_BOTTOM)) == [(3, 2), (3, 4)]

    def test_pawn_direction_follows_orientation(self):
        """青が下なら赤の兵は行が増える方向に進む"""
        board = board_from_pieces([(2, 3, Player.RED, False)])
        red = board.get_piece((2, 3))
        moves = MoveGenerator.simple_moves(board, red, Orientation.BLUE_BOTTOM)
        assert destinations(moves) == [(3, 2), (3, 4)]

    def test_pawn_on_edge(self):
        """盤端の兵は内側にしか動けない"""
        board = board_from_pieces([(5, 0, Player.RED, False)])
        moves = MoveGenerator.simple_moves(board, board.get_piece((5, 0)), RED_BOTTOM)
        assert destinations(moves) == [(4, 1)]

    def test_pawn_blocked_by_own_piece(self):
        """味方の駒があるマスには動けない"""
        board = board_from_pieces([
            (5, 2, Player.RED, False),
            (4, 1, Player.RED, False),
        ])
        moves = MoveGenerator.simple_moves(board, board.get_piece((5, 2)), RED_BOTTOM)
        assert destinations(moves) == [(4, 3)]

    def test_pawn_reaching_promotion_row(self):
        """成り段に着く単純移動は promotes が立つ"""
        board = board_from_pieces([(1, 2, Player.RED, False)])
        moves = MoveGenerator.simple_moves(board, board.get_piece((1, 2)), RED_BOTTOM)
        assert destinations(moves) == [(0, 1), (0, 3)]
        assert all(move.promotes for move in moves)

    def test_king_slides_along_rays(self):
        """王は斜め4方向に空マスが続く限り動ける"""
        board = board_from_pieces([(3, 3, Player.RED, True)])
        moves = MoveGenerator.simple_moves(board, board.get_piece((3, 3)), RED_BOTTOM)

        assert len(moves) == 13, f"王の移動先の数が正しくありません: {len(moves)}"
        assert (0, 0) in destinations(moves)
        assert (7, 7) in destinations(moves)
        assert not any(move.promotes for move in moves)

    def test_king_slide_stops_before_piece(self):
        """王のスライドは最初の駒の手前で止まる"""
        board = board_from_pieces([
            (3, 3, Player.RED, True),
            (1, 1, Player.RED, False),
        ])
        moves = MoveGenerator.simple_moves(board, board.get_piece((3, 3)), RED_BOTTOM)
        assert (2, 2) in destinations(moves)
        assert (1, 1) not in destinations(moves)
        assert (0, 0) not in destinations(moves)


class TestCaptureChains:
    """連続取りのテストクラス"""

    def test_pawn_captures_backward(self):
        """兵は後ろ向きにも取れる"""
        board = board_from_pieces([
            (3, 4, Player.RED, False),
            (4, 5, Player.BLUE, False),
        ])
        moves = MoveGenerator.all_moves(board, Player.RED, RED_BOTTOM)

        assert len(moves) == 1
        assert moves[0].to_pos == (5, 6)
        assert moves[0].captured_positions == [(4, 5)]

    def test_pawn_cannot_jump_onto_occupied_square(self):
        """着地マスが埋まっていれば取れない"""
        board = board_from_pieces([
            (5, 0, Player.RED, False),
            (4, 1, Player.BLUE, False),
            (3, 2, Player.BLUE, False),
        ])
        red = board.get_piece((5, 0))
        assert MoveGenerator.capture_chains(board, red, RED_BOTTOM) == []

    def test_two_jump_chain(self):
        """取った先でさらに取れるなら1つのチェーンになる"""
        board = board_from_pieces([
            (5, 0, Player.RED, False),
            (4, 1, Player.BLUE, False),
            (2, 3, Player.BLUE, False),
        ])
        chains = MoveGenerator.capture_chains(board, board.get_piece((5, 0)), RED_BOTTOM)

        assert len(chains) == 1
        chain = chains[0]
        assert [step.to_pos for step in chain.path] == [(3, 2), (1, 4)]
        assert chain.captured_ids == frozenset({1, 2})
        assert not chain.promotes

    def test_ring_chain_returns_to_start_square(self):
        """4枚を一周して取るチェーン: 同じ駒は二度取らない"""
        board = board_from_pieces([
            (6, 3, Player.RED, False),
            (5, 2, Player.BLUE, False),
            (3, 2, Player.BLUE, False),
            (3, 4, Player.BLUE, False),
            (5, 4, Player.BLUE, False),
        ])
        chains = MoveGenerator.capture_chains(board, board.get_piece((6, 3)), RED_BOTTOM)

        assert len(chains) == 2, f"一周するチェーンは左右2通りのはず: {chains}"
        for chain in chains:
            assert chain.capture_count == 4
            assert len(chain.path) == 4
            assert chain.to_pos == (6, 3)
            assert chain.captured_ids == frozenset({1, 2, 3, 4})

    def test_promotion_mid_chain_continues_as_king(self):
        """チェーンの途中で成った駒は王として取りを続ける"""
        board = board_from_pieces([
            (2, 1, Player.RED, False),
            (1, 2, Player.BLUE, False),
            (1, 4, Player.BLUE, False),
        ])
        chains = MoveGenerator.capture_chains(board, board.get_piece((2, 1)), RED_BOTTOM)

        assert destinations(chains) == [(2, 5), (3, 6), (4, 7)]
        for chain in chains:
            assert chain.capture_count == 2
            assert chain.path[0].to_pos == (0, 3)
            # 最終マスが成り段でないので promotes は立たない
            assert not chain.promotes

    def test_chain_ending_on_promotion_row_promotes(self):
        """最終マスが成り段なら promotes が立つ"""
        board = board_from_pieces([
            (2, 3, Player.RED, False),
            (1, 2, Player.BLUE, False),
            (7, 6, Player.BLUE, False),
        ])
        chains = MoveGenerator.capture_chains(board, board.get_piece((2, 3)), RED_BOTTOM)

        assert len(chains) == 1
        assert chains[0].to_pos == (0, 1)
        assert chains[0].promotes

    def test_king_capture_has_every_landing_beyond(self):
        """王の取りは敵駒の先の空マスすべてが着地候補"""
        board = board_from_pieces([
            (7, 0, Player.RED, True),
            (5, 2, Player.BLUE, False),
        ])
        chains = MoveGenerator.capture_chains(board, board.get_piece((7, 0)), RED_BOTTOM)
        assert destinations(chains) == [(0, 7), (1, 6), (2, 5), (3, 4), (4, 3)]

    def test_king_blocked_by_friendly_piece(self):
        """味方の駒の先にある敵駒は取れない"""
        board = board_from_pieces([
            (3, 3, Player.RED, True),
            (2, 2, Player.RED, False),
            (1, 1, Player.BLUE, False),
        ])
        chains = MoveGenerator.capture_chains(board, board.get_piece((3, 3)), RED_BOTTOM)
        assert chains == []

    def test_king_cannot_jump_two_pieces_at_once(self):
        """並んだ2枚の敵駒は飛び越せない"""
        board = board_from_pieces([
            (3, 3, Player.RED, True),
            (2, 2, Player.BLUE, False),
            (1, 1, Player.BLUE, False),
        ])
        chains = MoveGenerator.capture_chains(board, board.get_piece((3, 3)), RED_BOTTOM)
        assert chains == []


class TestMandatoryCapture:
    """取りの義務と最多取りのテストクラス"""

    def test_capture_excludes_simple_moves(self, red_bottom):
        """取れるときは単純移動が合法手に含まれない"""
        board = board_from_pieces([
            (5, 4, Player.RED, False),
            (5, 0, Player.RED, False),
            (4, 3, Player.BLUE, False),
        ])
        moves = MoveGenerator.all_moves(board, Player.RED, red_bottom)
        assert moves and all(move.is_capture for move in moves)

    def test_longest_chain_is_mandatory(self, red_bottom):
        """駒をまたいで、取る数が最大のチェーンだけが合法"""
        board = board_from_pieces([
            (5, 0, Player.RED, False),
            (7, 4, Player.RED, False),
            (4, 1, Player.BLUE, False),
            (2, 3, Player.BLUE, False),
            (6, 5, Player.BLUE, False),
        ])
        moves = MoveGenerator.all_moves(board, Player.RED, red_bottom)

        assert len(moves) == 1
        assert moves[0].from_pos == (5, 0)
        assert moves[0].capture_count == 2

    def test_equal_length_chains_all_legal(self, red_bottom):
        """同じ数を取るチェーンはすべて合法"""
        board = board_from_pieces([
            (5, 2, Player.RED, False),
            (4, 1, Player.BLUE, False),
            (4, 3, Player.BLUE, False),
        ])
        moves = MoveGenerator.all_moves(board, Player.RED, red_bottom)
        assert destinations(moves) == [(3, 0), (3, 4)]

    def test_piece_moves_filters_by_piece(self, initial_board, red_bottom):
        """駒ごとの合法手"""
        piece = initial_board.get_piece((5, 2))
        moves = MoveGenerator.piece_moves(initial_board, piece.piece_id, red_bottom)
        assert destinations(moves) == [(4, 1), (4, 3)]

    def test_opening_move_count(self, initial_board, red_bottom):
        """初期局面の赤の合法手は7通り"""
        assert len(MoveGenerator.all_moves(initial_board, Player.RED, red_bottom)) == 7
        assert len(MoveGenerator.all_moves(initial_board, Player.BLUE, red_bottom)) == 7

"""
测试CheckEngine类的功能

测试将军检测、将死判断 (帅/将走动、双将、拦截、吃子)、困毙和合法走法枚举。
"""

import numpy as np

from xiangqi_project.src.xiangqi_engine.rules_engine import (
    ChessBoard, CheckEngine, PieceKind, Side, Square,
)
from xiangqi_project.src.xiangqi_engine.rules_engine.check_engine import line_between

# 车在 (4,5) 将军，将可以走到 (5,9)
CHARIOT_CHECK = "4k4/9/9/9/4R4/9/9/9/9/3K5 w - - 0 1"
# 车沿底线将军，另一车封住 rank 8，帅控制 file 4
CHARIOT_MATE = "R2k5/8R/9/9/9/9/9/9/9/4K4 w - - 0 1"
# 同上，但黑车可以拦在 (2,9)
CHARIOT_CHECK_BLOCKABLE = "R2k5/8R/9/9/9/9/9/9/2r6/4K4 w - - 0 1"
# 车、马双将
DOUBLE_CHECK_MATE = "4ka3/2N6/9/9/4R4/9/9/9/9/3K5 w - - 0 1"
# 马将军，马腿 (3,8) 为空
KNIGHT_MATE = "3aka3/R8/3N5/9/9/9/9/9/9/5K3 w - - 0 1"
# 同上，黑炮可以塞住马腿
KNIGHT_LEG_BLOCK = "3aka3/R7c/3N5/9/9/9/9/9/9/5K3 w - - 0 1"
# 炮将军，炮架是黑士
CANNON_SCREEN = "4k4/4a4/9/9/4C4/9/9/9/5R3/3K5 w - - 0 1"
# 将被困在角上，未被将军
STALEMATE = "3k5/8R/9/9/9/9/9/9/9/4K4 w - - 0 1"
# 同上，但黑卒还能走
STALEMATE_WITH_PAWN = "3k5/8R/9/9/9/9/p8/9/9/4K4 w - - 0 1"


def engine_for(fen):
    board = ChessBoard(fen)
    return board, CheckEngine(board)


class TestCheckDetection:
    """将军检测的测试"""

    def test_initial_position_not_in_check(self):
        _, engine = engine_for("rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w - - 0 1")
        assert not engine.is_in_check(Side.RED)
        assert not engine.is_in_check(Side.BLACK)
        assert engine.checkers(Side.BLACK) == []

    def test_chariot_check(self):
        _, engine = engine_for(CHARIOT_CHECK)
        assert engine.checkers(Side.BLACK) == [(PieceKind.CHARIOT, Square(4, 5))]
        assert not engine.is_in_check(Side.RED)

    def test_double_check(self):
        _, engine = engine_for(DOUBLE_CHECK_MATE)
        checkers = engine.checkers(Side.BLACK)
        assert set(checkers) == {(PieceKind.CHARIOT, Square(4, 5)), (PieceKind.KNIGHT, Square(2, 8))}

    def test_cannon_check_needs_one_screen(self):
        board, engine = engine_for(CANNON_SCREEN)
        assert engine.checkers(Side.BLACK) == [(PieceKind.CANNON, Square(4, 5))]

        # 移开炮架后不再将军
        board.move_piece(Square(4, 8), Square(3, 9))
        assert not engine.is_in_check(Side.BLACK)

    def test_pawn_check(self):
        _, engine = engine_for("3k5/3P5/9/9/9/9/9/9/9/4K4 w - - 0 1")
        assert engine.checkers(Side.BLACK) == [(PieceKind.PAWN, Square(3, 8))]

    def test_checkers_leave_board_untouched(self):
        board, engine = engine_for(CANNON_SCREEN)
        before = board.snapshot()
        engine.checkers(Side.BLACK)
        engine.is_checkmate(Side.BLACK)
        engine.generate_legal_moves(Side.BLACK)
        assert np.array_equal(board.board, before)


class TestCheckmate:
    """将死判断的测试"""

    def test_not_checked_is_not_mate(self):
        _, engine = engine_for(STALEMATE)
        assert not engine.is_checkmate(Side.BLACK)

    def test_king_escape_averts_mate(self):
        _, engine = engine_for(CHARIOT_CHECK)
        assert not engine.is_checkmate(Side.BLACK)

    def test_chariot_mate(self):
        _, engine = engine_for(CHARIOT_MATE)
        assert engine.checkers(Side.BLACK) == [(PieceKind.CHARIOT, Square(0, 9))]
        assert engine.is_checkmate(Side.BLACK)

    def test_block_averts_chariot_mate(self):
        _, engine = engine_for(CHARIOT_CHECK_BLOCKABLE)
        assert engine.is_in_check(Side.BLACK)
        assert not engine.is_checkmate(Side.BLACK)

    def test_double_check_mate(self):
        """双将时帅/将走不动即判将死"""
        _, engine = engine_for(DOUBLE_CHECK_MATE)
        assert engine.is_checkmate(Side.BLACK)

    def test_knight_mate(self):
        _, engine = engine_for(KNIGHT_MATE)
        assert engine.checkers(Side.BLACK) == [(PieceKind.KNIGHT, Square(3, 7))]
        assert engine.is_checkmate(Side.BLACK)

    def test_knight_leg_block_averts_mate(self):
        """塞马腿可以解将"""
        _, engine = engine_for(KNIGHT_LEG_BLOCK)
        assert engine.is_in_check(Side.BLACK)
        assert not engine.is_checkmate(Side.BLACK)

    def test_pawn_mate(self):
        _, engine = engine_for("4k4/4P4/9/9/9/4R4/5R3/9/9/3K5 w - - 0 1")
        assert engine.checkers(Side.BLACK) == [(PieceKind.PAWN, Square(4, 8))]
        assert engine.is_checkmate(Side.BLACK)

    def test_capturing_pawn_averts_mate(self):
        """士吃兵解将"""
        _, engine = engine_for("3ak4/4P4/9/9/9/4R4/5R3/9/9/3K5 w - - 0 1")
        assert engine.is_in_check(Side.BLACK)
        assert not engine.is_checkmate(Side.BLACK)

    def test_moving_cannon_screen_averts_mate(self):
        _, engine = engine_for(CANNON_SCREEN)
        assert not engine.is_checkmate(Side.BLACK)

    def test_explicit_checkers_argument(self):
        _, engine = engine_for(CHARIOT_MATE)
        assert engine.is_checkmate(Side.BLACK, engine.checkers(Side.BLACK))
        assert not engine.is_checkmate(Side.BLACK, [])


class TestStalemate:
    """困毙与走法枚举的测试"""

    def test_king_mobility_stalemate(self):
        _, engine = engine_for(STALEMATE)
        assert not engine.is_in_check(Side.BLACK)
        assert engine.is_stalemate(Side.BLACK)
        assert engine.is_stalemate(Side.BLACK, full_search=True)

    def test_full_search_sees_other_pieces(self):
        _, engine = engine_for(STALEMATE_WITH_PAWN)
        assert engine.is_stalemate(Side.BLACK)
        assert not engine.is_stalemate(Side.BLACK, full_search=True)

    def test_checked_side_is_not_stalemate(self):
        _, engine = engine_for(CHARIOT_MATE)
        assert not engine.is_stalemate(Side.BLACK)

    def test_initial_legal_moves(self):
        """标准开局红方有44种走法"""
        _, engine = engine_for("rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w - - 0 1")
        red_moves = engine.generate_legal_moves(Side.RED)
        assert len(red_moves) == 44
        assert len(engine.generate_legal_moves(Side.BLACK)) == 44

        coordinates = {move.to_coordinate_notation() for move in red_moves}
        assert 'b2e2' in coordinates   # 炮二平五
        assert 'b2b9' in coordinates   # 炮打马
        assert 'b2b7' not in coordinates
        assert 'b0c2' in coordinates   # 马二进三

    def test_legal_moves_exclude_self_check(self):
        """被牵制的车不能离开帅所在的列"""
        _, engine = engine_for("3k5/4r4/9/9/9/9/4R4/9/9/4K4 w - - 0 1")
        chariot_moves = [m for m in engine.generate_legal_moves(Side.RED) if m.kind is PieceKind.CHARIOT]
        assert chariot_moves
        assert all(m.destination.file == 4 for m in chariot_moves)


def test_line_between():
    assert line_between(Square(4, 5), Square(4, 9)) == [Square(4, 6), Square(4, 7), Square(4, 8)]
    assert line_between(Square(3, 9), Square(0, 9)) == [Square(1, 9), Square(2, 9)]
    assert line_between(Square(0, 0), Square(0, 1)) == []

"""
测试中文纵线记法

测试指令解析、黑方方向交换、前后标记、距离换算以及记法生成。
"""

import pytest

from xiangqi_project.src.xiangqi_engine.rules_engine import (
    ChessBoard, Direction, Move, NotationParser, PieceKind, Side, Square,
)
from xiangqi_project.src.xiangqi_engine.utils.exceptions import GeometryError, ParseError

TWO_RED_CHARIOTS = "3k5/9/9/9/9/R8/9/9/R8/4K4 w - - 0 1"
TWO_BLACK_CHARIOTS = "3k5/r8/9/9/r8/9/9/9/9/4K4 w - - 0 1"
THREE_RED_PAWNS = "3k5/9/4P4/P8/P8/9/9/9/9/5K3 w - - 0 1"


class TestNotationParser:
    """NotationParser类的测试"""

    def setup_method(self):
        """每个测试方法前的设置"""
        self.board = ChessBoard()
        self.parser = NotationParser(self.board)

    def parse(self, text, side=Side.RED):
        move = self.parser.parse(text, side)
        return move.kind, move.origin, move.destination

    @pytest.mark.parametrize("text, kind, origin, destination", [
        ("炮二平五", PieceKind.CANNON, (1, 2), (4, 2)),
        ("马二进三", PieceKind.KNIGHT, (1, 0), (2, 2)),
        ("相三进五", PieceKind.BISHOP, (2, 0), (4, 2)),
        ("士四进五", PieceKind.ADVISOR, (3, 0), (4, 1)),
        ("帅五进一", PieceKind.KING, (4, 0), (4, 1)),
        ("兵三进一", PieceKind.PAWN, (2, 3), (2, 4)),
        ("车一进二", PieceKind.CHARIOT, (0, 0), (0, 2)),
        ("炮八进四", PieceKind.CANNON, (7, 2), (7, 6)),
    ])
    def test_red_named_form(self, text, kind, origin, destination):
        """测试红方列号形式"""
        assert self.parse(text) == (kind, Square(*origin), Square(*destination))

    @pytest.mark.parametrize("text, kind, origin, destination", [
        ("炮8平5", PieceKind.CANNON, (7, 7), (4, 7)),
        ("马2进3", PieceKind.KNIGHT, (1, 9), (2, 7)),
        ("卒3进1", PieceKind.PAWN, (2, 6), (2, 5)),
        ("车1进1", PieceKind.CHARIOT, (0, 9), (0, 8)),
        ("象7进5", PieceKind.BISHOP, (6, 9), (4, 7)),
        ("将5进1", PieceKind.KING, (4, 9), (4, 8)),
    ])
    def test_black_named_form(self, text, kind, origin, destination):
        """测试黑方"进"表示 rank 减小"""
        assert self.parse(text, Side.BLACK) == (kind, Square(*origin), Square(*destination))

    def test_numeral_variants(self):
        """测试中文数字、全角数字和繁体字"""
        expected = (PieceKind.CANNON, Square(7, 7), Square(4, 7))
        assert self.parse("炮八平五", Side.BLACK) == expected
        assert self.parse("炮８平５", Side.BLACK) == expected
        assert self.parse("砲8平5", Side.BLACK) == expected
        assert self.parse(" 炮 二 平 五 ") == (PieceKind.CANNON, Square(1, 2), Square(4, 2))
        assert self.parse("傌二进三") == (PieceKind.KNIGHT, Square(1, 0), Square(2, 2))

    def test_move_keeps_text(self):
        move = self.parser.parse(" 炮二平五", Side.RED)
        assert move.text == "炮二平五"
        assert move.side is Side.RED

    def test_front_and_rear_red(self):
        """测试红方前后标记：前取 rank 最小，后取 rank 最大"""
        parser = NotationParser(ChessBoard(TWO_RED_CHARIOTS))
        front = parser.parse("前车进一", Side.RED)
        rear = parser.parse("后车进一", Side.RED)
        assert (front.origin, front.destination) == (Square(0, 1), Square(0, 2))
        assert (rear.origin, rear.destination) == (Square(0, 4), Square(0, 5))

        # 列号形式取同列 rank 最小的一枚
        named = parser.parse("车一进一", Side.RED)
        assert named.origin == Square(0, 1)

    def test_front_and_rear_black(self):
        """测试黑方前后标记在解析前互换"""
        parser = NotationParser(ChessBoard(TWO_BLACK_CHARIOTS))
        front = parser.parse("前车进1", Side.BLACK)
        rear = parser.parse("后车进1", Side.BLACK)
        assert (front.origin, front.destination) == (Square(0, 8), Square(0, 7))
        assert (rear.origin, rear.destination) == (Square(0, 5), Square(0, 4))

    @pytest.mark.parametrize("text, code", [
        ("炮二平", ParseError.MALFORMED_INSTRUCTION),
        ("炮二平五五", ParseError.MALFORMED_INSTRUCTION),
        ("", ParseError.MALFORMED_INSTRUCTION),
        ("炮十平五", ParseError.ILLEGAL_NUMERAL),
        ("车一进两", ParseError.ILLEGAL_NUMERAL),
        ("车一进0", ParseError.ILLEGAL_NUMERAL),
        ("龙二平五", ParseError.UNKNOWN_PIECE_NAME),
        ("卒三进一", ParseError.UNKNOWN_PIECE_NAME),
        ("炮三平五", ParseError.NO_PIECE_AT_ORIGIN),
        ("炮二跳五", ParseError.UNKNOWN_DIRECTION),
        ("炮X平五", ParseError.MALFORMED_INSTRUCTION),
        ("炮二平X", ParseError.MALFORMED_INSTRUCTION),
    ])
    def test_parse_errors(self, text, code):
        """测试解析失败的分类"""
        with pytest.raises(ParseError) as exc_info:
            self.parser.parse(text, Side.RED)
        assert exc_info.value.error_code == code

    def test_parse_error_messages(self):
        """测试解析失败的中文原因"""
        with pytest.raises(ParseError) as exc_info:
            self.parser.parse("炮三平五", Side.RED)
        assert exc_info.value.reason == "指令中的起始位置没有棋子'炮'"
        assert exc_info.value.instruction == "炮三平五"

        with pytest.raises(ParseError) as exc_info:
            self.parser.parse("炮二平", Side.RED)
        assert exc_info.value.reason == "指令长度不正确"

    def test_no_such_piece(self):
        """测试前后标记找不到棋子"""
        parser = NotationParser(ChessBoard(TWO_RED_CHARIOTS))
        with pytest.raises(ParseError) as exc_info:
            parser.parse("前炮进一", Side.RED)
        assert exc_info.value.error_code == ParseError.NO_SUCH_PIECE

    @pytest.mark.parametrize("text, reason", [
        ("马二平三", "马不能横向移动"),
        ("马二进五", "马只能走日字形"),
        ("相三进四", "相只能走田字"),
        ("士四进六", "士只能走斜线"),
        ("帅五进二", "帅只能走一格"),
        ("兵三退一", "兵不能后退"),
        ("兵三进二", "兵最多只能前进一格"),
    ])
    def test_distance_errors(self, text, reason):
        """测试距离与棋子走法不符"""
        with pytest.raises(GeometryError) as exc_info:
            self.parser.parse(text, Side.RED)
        assert exc_info.value.reason == reason


class TestFinalDestination:
    """final_destination 的测试"""

    def test_chariot_steps_and_column(self):
        origin = Square(4, 4)
        assert NotationParser.final_destination(
            PieceKind.CHARIOT, Side.RED, origin, 3, Direction.FORWARD) == Square(4, 7)
        assert NotationParser.final_destination(
            PieceKind.CHARIOT, Side.RED, origin, 3, Direction.BACKWARD) == Square(4, 1)
        assert NotationParser.final_destination(
            PieceKind.CANNON, Side.RED, origin, 9, Direction.HORIZONTAL) == Square(8, 4)

    def test_knight_targets(self):
        origin = Square(4, 4)
        assert NotationParser.final_destination(
            PieceKind.KNIGHT, Side.RED, origin, 4, Direction.FORWARD) == Square(3, 6)
        assert NotationParser.final_destination(
            PieceKind.KNIGHT, Side.RED, origin, 7, Direction.BACKWARD) == Square(6, 3)

    def test_off_board_destination_is_returned(self):
        """终点越界时由规则引擎报告"""
        assert NotationParser.final_destination(
            PieceKind.CHARIOT, Side.RED, Square(0, 5), 9, Direction.FORWARD) == Square(0, 14)

    def test_pawn_sideways(self):
        assert NotationParser.final_destination(
            PieceKind.PAWN, Side.BLACK, Square(4, 4), 4, Direction.HORIZONTAL) == Square(3, 4)
        with pytest.raises(GeometryError):
            NotationParser.final_destination(
                PieceKind.PAWN, Side.BLACK, Square(4, 4), 7, Direction.HORIZONTAL)


class TestMoveNotation:
    """Move 记法生成的测试"""

    def test_red_notation(self):
        assert Move(PieceKind.CANNON, Side.RED, Square(1, 2), Square(4, 2)).to_chinese_notation() == "炮二平五"
        assert Move(PieceKind.CHARIOT, Side.RED, Square(0, 0), Square(0, 2)).to_chinese_notation() == "车一进二"
        assert Move(PieceKind.KNIGHT, Side.RED, Square(2, 2), Square(1, 0)).to_chinese_notation() == "马三退二"

    def test_black_notation(self):
        assert Move(PieceKind.KNIGHT, Side.BLACK, Square(1, 9), Square(2, 7)).to_chinese_notation() == "马2进3"
        assert Move(PieceKind.CHARIOT, Side.BLACK, Square(0, 8), Square(0, 9)).to_chinese_notation() == "车1退1"

    def test_rear_marker(self):
        """测试同列两枚时生成前后标记"""
        board = ChessBoard(TWO_RED_CHARIOTS)
        rear = Move(PieceKind.CHARIOT, Side.RED, Square(0, 4), Square(0, 5))
        assert rear.to_chinese_notation(board) == "后车进一"
        lower = Move(PieceKind.CHARIOT, Side.RED, Square(0, 1), Square(0, 2))
        assert lower.to_chinese_notation(board) == "车一进一"

        board = ChessBoard(TWO_BLACK_CHARIOTS)
        upper = Move(PieceKind.CHARIOT, Side.BLACK, Square(0, 8), Square(0, 7))
        assert upper.to_chinese_notation(board) == "前车进1"

    def test_notation_parses_back(self):
        """测试生成的记法能解析回同一走法"""
        board = ChessBoard(TWO_BLACK_CHARIOTS)
        parser = NotationParser(board)
        for origin, destination in [((0, 8), (0, 7)), ((0, 5), (0, 4)), ((0, 5), (3, 5))]:
            move = Move(PieceKind.CHARIOT, Side.BLACK, Square(*origin), Square(*destination))
            parsed = parser.parse(move.to_chinese_notation(board), Side.BLACK)
            assert (parsed.origin, parsed.destination) == (move.origin, move.destination)

    def test_third_pawn_uses_coordinates(self):
        """三兵时中间的兵没有中文记法"""
        board = ChessBoard(THREE_RED_PAWNS)
        middle = Move(PieceKind.PAWN, Side.RED, Square(0, 6), Square(0, 7))
        assert middle.to_chinese_notation(board) == "a6a7"

        lower = Move(PieceKind.PAWN, Side.RED, Square(0, 5), Square(1, 5))
        assert lower.to_chinese_notation(board) == "兵一平二"
        parsed = NotationParser(board).parse("兵一平二", Side.RED)
        assert parsed.origin == Square(0, 5)

        front = Move(PieceKind.PAWN, Side.RED, Square(4, 7), Square(4, 8))
        assert front.to_chinese_notation(board) == "兵五进一"

    def test_coordinate_notation(self):
        move = Move(PieceKind.CANNON, Side.RED, Square(1, 2), Square(4, 2))
        assert move.to_coordinate_notation() == "b2e2"
        assert str(move) == "b2e2"
        assert move.to_dict()['kind'] == 'CANNON'

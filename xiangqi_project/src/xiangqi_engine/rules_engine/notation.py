"""
中文纵线记法解析

将四字指令 (如 "炮二平五"、"前马进三") 与行棋方解析为起点和终点。

约定：
- 列号两方都从 file 0 数起，数字 n 对应 file n-1。
- 黑方指令先交换"进/退"与"前/后"，之后"进"一律表示 rank 增加。
- "前"取 rank 最小的同种棋子，"后"取 rank 最大的。
- 马、相/象、士的距离以及所有"平"的距离是目标列号，其余是步数。
"""

from typing import Dict

from .board import ChessBoard
from .move import (
    CHINESE_NUMERALS, COLUMN_DISTANCE_KINDS, FRONT_MARKER, REAR_MARKER, Direction, Move,
)
from .pieces import BOARD_FILES, PieceKind, Side, Square, glyph_of, kind_of_glyph, GLYPH_ALIASES
from ..utils.exceptions import GeometryError, ParseError
from ..utils.logger import LoggerMixin


class NotationParser(LoggerMixin):
    """
    记法解析器

    只读取棋盘来定位棋子，不做合法性检查。
    """

    # 不被接受的数字写法
    ILLEGAL_NUMERALS = ("零", "〇", "十", "百", "两", "0")

    # 黑方指令需要交换的字
    BLACK_SWAPS = {
        Direction.FORWARD.value: Direction.BACKWARD.value,
        Direction.BACKWARD.value: Direction.FORWARD.value,
        FRONT_MARKER: REAR_MARKER,
        REAR_MARKER: FRONT_MARKER,
    }

    def __init__(self, board: ChessBoard):
        """
        初始化解析器

        Args:
            board: 用于定位棋子的棋盘
        """
        self.board = board

        self._numerals: Dict[str, str] = {glyph: str(i + 1) for i, glyph in enumerate(CHINESE_NUMERALS)}
        # 全角数字
        self._numerals.update({chr(ord("１") + i): str(i + 1) for i in range(9)})
        self._numerals["０"] = "0"

    def normalize(self, text: str) -> str:
        """
        规范化指令：去除空白，替换繁体/异体字与中文数字

        Raises:
            ParseError: 包含非法的数字写法
        """
        instruction = "".join(text.split())
        chars = []
        for char in instruction:
            char = GLYPH_ALIASES.get(char, char)
            char = self._numerals.get(char, char)
            if char in self.ILLEGAL_NUMERALS:
                raise ParseError("指令中包含非法的汉字数字", ParseError.ILLEGAL_NUMERAL, text)
            chars.append(char)
        return "".join(chars)

    def parse(self, text: str, side: Side) -> Move:
        """
        解析指令

        Args:
            text: 原始指令
            side: 行棋方

        Returns:
            Move: 解析出的走法，终点可能越界，由规则引擎判定

        Raises:
            ParseError: 指令无法解析
            GeometryError: 距离与棋子的走法不符
        """
        instruction = self.normalize(text)
        if side is Side.BLACK:
            instruction = "".join(self.BLACK_SWAPS.get(char, char) for char in instruction)

        if len(instruction) != 4:
            raise ParseError("指令长度不正确", ParseError.MALFORMED_INSTRUCTION, text)

        head, marker, direction_glyph, distance_glyph = instruction

        if head in (FRONT_MARKER, REAR_MARKER):
            kind, origin = self._resolve_disambiguated(head, marker, side, text)
        else:
            kind, origin = self._resolve_named(head, marker, side, text)

        try:
            direction = Direction(direction_glyph)
        except ValueError:
            raise ParseError("指令中的移动方向不正确", ParseError.UNKNOWN_DIRECTION, text)

        distance = self._digit(distance_glyph)
        if distance is None:
            raise ParseError("指令中的目标位置不正确", ParseError.MALFORMED_INSTRUCTION, text)

        destination = self.final_destination(kind, side, origin, distance, direction)
        self.log_debug(f"解析 {text!r}: {glyph_of(kind, side)} {tuple(origin)} -> {tuple(destination)}")
        return Move(kind, side, origin, destination, text=text.strip())

    def _resolve_named(self, glyph: str, marker: str, side: Side, text: str):
        kind = kind_of_glyph(glyph, side)
        if kind is None:
            raise ParseError("指令中的棋子名称不正确", ParseError.UNKNOWN_PIECE_NAME, text)

        column = self._digit(marker)
        if column is None:
            raise ParseError("指令中的起始位置不正确", ParseError.MALFORMED_INSTRUCTION, text)

        # 同列有两枚时取 rank 较小的一枚
        for square in self.board.positions_of(kind, side):
            if square.file == column - 1:
                return kind, square
        raise ParseError(f"指令中的起始位置没有棋子'{glyph_of(kind, side)}'",
                         ParseError.NO_PIECE_AT_ORIGIN, text)

    def _resolve_disambiguated(self, head: str, glyph: str, side: Side, text: str):
        kind = kind_of_glyph(glyph, side)
        if kind is None:
            raise ParseError("指令中的棋子名称不正确", ParseError.UNKNOWN_PIECE_NAME, text)

        positions = sorted(self.board.positions_of(kind, side), key=lambda square: square.rank)
        if not positions:
            raise ParseError(f"指令中的起始位置没有棋子'{glyph_of(kind, side)}'",
                             ParseError.NO_SUCH_PIECE, text)
        return kind, positions[0] if head == FRONT_MARKER else positions[-1]

    @staticmethod
    def _digit(char: str):
        if len(char) == 1 and "1" <= char <= "9" and int(char) <= BOARD_FILES:
            return int(char)
        return None

    @staticmethod
    def final_destination(kind: PieceKind, side: Side, origin: Square, distance: int,
                          direction: Direction) -> Square:
        """
        将记法中的距离换算为终点

        Args:
            kind: 棋子类型
            side: 行棋方
            origin: 起点
            distance: 记法中的数字 (1-9)
            direction: 交换后的方向，FORWARD 表示 rank 增加

        Returns:
            Square: 终点

        Raises:
            GeometryError: 距离与棋子的走法不符
        """
        label = glyph_of(kind, side)
        sign = -1 if direction is Direction.BACKWARD else 1

        if kind in COLUMN_DISTANCE_KINDS or direction is Direction.HORIZONTAL:
            target_file = distance - 1
            file_delta = abs(target_file - origin.file)
        else:
            target_file, file_delta = origin.file, 0

        if kind in (PieceKind.CHARIOT, PieceKind.CANNON):
            if direction is Direction.HORIZONTAL:
                return Square(target_file, origin.rank)
            return origin.offset(0, sign * distance)

        if kind in COLUMN_DISTANCE_KINDS:
            if direction is Direction.HORIZONTAL:
                raise GeometryError(f"{label}不能横向移动")
            if kind is PieceKind.KNIGHT and file_delta in (1, 2):
                return Square(target_file, origin.rank + sign * (3 - file_delta))
            if kind is PieceKind.BISHOP and file_delta == 2:
                return Square(target_file, origin.rank + sign * 2)
            if kind is PieceKind.ADVISOR and file_delta == 1:
                return Square(target_file, origin.rank + sign)
            shapes = {
                PieceKind.KNIGHT: "只能走日字形",
                PieceKind.BISHOP: "只能走田字",
                PieceKind.ADVISOR: "只能走斜线",
            }
            raise GeometryError(f"{label}{shapes[kind]}")

        # 帅/将、兵/卒每次只走一格
        if direction is Direction.HORIZONTAL:
            if file_delta != 1:
                message = "只能走一格" if kind is PieceKind.KING else "最多只能左右移动一格"
                raise GeometryError(f"{label}{message}")
            return Square(target_file, origin.rank)

        if distance != 1:
            message = "只能走一格" if kind is PieceKind.KING else "最多只能前进一格"
            raise GeometryError(f"{label}{message}")
        if kind is PieceKind.PAWN and sign != side.forward:
            raise GeometryError(f"{label}不能后退")
        return origin.offset(0, sign)

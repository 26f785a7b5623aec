"""
象棋走法数据结构

定义解析后的走法，以及走法与中文纵线记法、坐标记法之间的转换。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .pieces import PieceKind, Side, Square, glyph_of


# 中文数字 (索引 + 1 即数值)
CHINESE_NUMERALS = ("一", "二", "三", "四", "五", "六", "七", "八", "九")

# 前后标记
FRONT_MARKER = "前"
REAR_MARKER = "后"


class Direction(Enum):
    """走法方向，均以棋盘 rank 增加为"进" """
    FORWARD = "进"
    BACKWARD = "退"
    HORIZONTAL = "平"


# 距离按列号解释的棋子
COLUMN_DISTANCE_KINDS = (PieceKind.ADVISOR, PieceKind.KNIGHT, PieceKind.BISHOP)


@dataclass(frozen=True)
class Move:
    """
    象棋走法类

    表示一个已解析的走法。text 为原始指令，由坐标直接构造时为空。
    """
    kind: PieceKind
    side: Side
    origin: Square
    destination: Square
    text: str = ""

    @property
    def is_horizontal(self) -> bool:
        return self.origin.rank == self.destination.rank

    def to_coordinate_notation(self) -> str:
        """
        转换为坐标记法

        Returns:
            str: 坐标记法字符串，如 "b2e2" (列字母 + rank)
        """
        from_col = chr(ord('a') + self.origin.file)
        to_col = chr(ord('a') + self.destination.file)
        return f"{from_col}{self.origin.rank}{to_col}{self.destination.rank}"

    def to_chinese_notation(self, board=None) -> str:
        """
        转换为中文纵线记法

        红方用中文数字，黑方用阿拉伯数字。列号两方都从 file 0 数起。
        黑方的"进"表示 rank 减小。

        Args:
            board: 走子前的棋盘；同列有同种棋子时用于生成"前/后"记法

        Returns:
            str: 中文记法字符串，如 "炮二平五"；列号与前后标记都指不到起点的棋子时
                 返回坐标记法
        """
        glyph = glyph_of(self.kind, self.side)
        reference = glyph + self._numeral(self.origin.file + 1)

        if board is not None:
            reference = self._reference(board, glyph)
            if reference is None:
                return self.to_coordinate_notation()

        if self.is_horizontal:
            return f"{reference}{Direction.HORIZONTAL.value}{self._numeral(self.destination.file + 1)}"

        advance = (self.destination.rank - self.origin.rank) * self.side.forward
        direction = Direction.FORWARD if advance > 0 else Direction.BACKWARD
        if self.kind in COLUMN_DISTANCE_KINDS:
            distance = self.destination.file + 1
        else:
            distance = abs(self.destination.rank - self.origin.rank)
        return f"{reference}{direction.value}{self._numeral(distance)}"

    def _numeral(self, n: int) -> str:
        return CHINESE_NUMERALS[n - 1] if self.side is Side.RED else str(n)

    def _reference(self, board, glyph: str) -> Optional[str]:
        # 列号形式总是取同列 rank 最小的棋子，"后"(黑方"前") 取全部同种棋子中 rank 最大的
        same_column = [sq for sq in board.positions_of(self.kind, self.side)
                       if sq.file == self.origin.file]
        if same_column[0] == self.origin:
            return glyph + self._numeral(self.origin.file + 1)

        ranked = sorted(board.positions_of(self.kind, self.side), key=lambda sq: sq.rank)
        if ranked[-1] == self.origin:
            # 黑方解析时前后互换
            return (REAR_MARKER if self.side is Side.RED else FRONT_MARKER) + glyph
        return None

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            'kind': self.kind.name,
            'side': self.side.name,
            'origin': tuple(self.origin),
            'destination': tuple(self.destination),
            'text': self.text,
        }

    def __str__(self) -> str:
        return self.text or self.to_coordinate_notation()

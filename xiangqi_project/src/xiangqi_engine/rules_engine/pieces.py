"""
棋子与坐标定义

定义阵营、棋子类型、棋盘坐标以及棋子名称表。

坐标系: file 为列 (0-8)，两方均以最左列为 0；rank 为行 (0-9)，
红方底线为 0，黑方底线为 9。
"""

from enum import Enum, IntEnum
from typing import Dict, NamedTuple, Optional, Tuple


BOARD_FILES = 9
BOARD_RANKS = 10


class Side(IntEnum):
    """阵营 (1: 红方, -1: 黑方)"""
    RED = 1
    BLACK = -1

    @property
    def opponent(self) -> 'Side':
        """对方阵营"""
        return Side.BLACK if self is Side.RED else Side.RED

    @property
    def display_name(self) -> str:
        return "红方" if self is Side.RED else "黑方"

    @property
    def forward(self) -> int:
        """前进方向上 rank 的增量"""
        return 1 if self is Side.RED else -1


class PieceKind(IntEnum):
    """
    棋子类型

    数值即棋盘矩阵中的编码，红方为正，黑方为负。
    """
    KING = 1      # 帅/将
    ADVISOR = 2   # 士
    BISHOP = 3    # 相/象
    KNIGHT = 4    # 马
    CHARIOT = 5   # 车
    CANNON = 6    # 炮
    PAWN = 7      # 兵/卒


# 棋子名称表 (红方, 黑方)
PIECE_GLYPHS: Dict[PieceKind, Tuple[str, str]] = {
    PieceKind.CHARIOT: ('车', '车'),
    PieceKind.KNIGHT: ('马', '马'),
    PieceKind.BISHOP: ('相', '象'),
    PieceKind.ADVISOR: ('士', '士'),
    PieceKind.KING: ('帅', '将'),
    PieceKind.CANNON: ('炮', '炮'),
    PieceKind.PAWN: ('兵', '卒'),
}

# 繁体及常见异体字
GLYPH_ALIASES: Dict[str, str] = {
    '車': '车', '俥': '车',
    '馬': '马', '傌': '马',
    '砲': '炮', '包': '炮',
    '仕': '士',
    '帥': '帅',
    '將': '将',
}

# FEN记法中的棋子符号
FEN_SYMBOLS: Dict[PieceKind, str] = {
    PieceKind.KING: 'K',
    PieceKind.ADVISOR: 'A',
    PieceKind.BISHOP: 'B',
    PieceKind.KNIGHT: 'N',
    PieceKind.CHARIOT: 'R',
    PieceKind.CANNON: 'C',
    PieceKind.PAWN: 'P',
}


def glyph_of(kind: PieceKind, side: Side) -> str:
    """获取棋子在指定阵营下的名称"""
    red, black = PIECE_GLYPHS[kind]
    return red if side is Side.RED else black


def kind_of_glyph(glyph: str, side: Side) -> Optional[PieceKind]:
    """
    根据阵营下的棋子名称查找棋子类型

    Args:
        glyph: 棋子名称，允许繁体/异体字
        side: 阵营

    Returns:
        Optional[PieceKind]: 棋子类型，找不到时返回None
    """
    glyph = GLYPH_ALIASES.get(glyph, glyph)
    for kind in PIECE_GLYPHS:
        if glyph_of(kind, side) == glyph:
            return kind
    return None


class Square(NamedTuple):
    """棋盘坐标 (file, rank)，允许越界值以便报告出界走法"""
    file: int
    rank: int

    @property
    def in_bounds(self) -> bool:
        return 0 <= self.file < BOARD_FILES and 0 <= self.rank < BOARD_RANKS

    def offset(self, dfile: int, drank: int) -> 'Square':
        return Square(self.file + dfile, self.rank + drank)


class Piece(NamedTuple):
    """棋盘上的一枚棋子"""
    kind: PieceKind
    side: Side

    @property
    def code(self) -> int:
        """棋盘矩阵编码"""
        return int(self.kind) * int(self.side)

    @property
    def glyph(self) -> str:
        return glyph_of(self.kind, self.side)

    @classmethod
    def from_code(cls, code: int) -> Optional['Piece']:
        if code == 0:
            return None
        return cls(PieceKind(abs(code)), Side.RED if code > 0 else Side.BLACK)


def in_palace(side: Side, square: Square) -> bool:
    """九宫: 红方 files 3-5 × ranks 0-2，黑方 files 3-5 × ranks 7-9"""
    if not 3 <= square.file <= 5:
        return False
    if side is Side.RED:
        return 0 <= square.rank <= 2
    return 7 <= square.rank <= 9


def in_home_half(side: Side, rank: int) -> bool:
    """己方半场: 红方 ranks 0-4，黑方 ranks 5-9"""
    return rank <= 4 if side is Side.RED else rank >= 5

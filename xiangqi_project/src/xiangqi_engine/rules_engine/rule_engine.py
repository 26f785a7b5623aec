"""
象棋规则引擎

逐棋子校验走法的合法性。

提供两种查询：
- reaches(): 几何可达性，不检查飞将，将军检测用它判断攻击。
- check_move(): 完整合法性，包含飞将与吃帅/将的禁止，用于真实走子。
"""

from typing import Callable, Dict, List, Optional, Tuple

from .board import ChessBoard
from .pieces import (
    BOARD_FILES, BOARD_RANKS, PieceKind, Side, Square, glyph_of, in_home_half, in_palace,
)
from ..utils.exceptions import GeometryError, InvariantViolation


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


class RuleEngine:
    """
    象棋规则引擎

    按 形状 -> 边界 -> 阻挡/区域 -> 吃子方 -> 飞将 的顺序检查走法，
    返回第一条违例。引擎只读棋盘，飞将检测在 probe() 中试走后回滚。
    """

    def __init__(self, board: ChessBoard):
        """
        初始化规则引擎

        Args:
            board: 被检查的棋盘
        """
        self.board = board

        # 棋子移动方向定义 (dfile, drank)
        self.king_moves = [(0, 1), (0, -1), (-1, 0), (1, 0)]  # 帅/将：上下左右
        self.advisor_moves = [(1, 1), (1, -1), (-1, 1), (-1, -1)]  # 士：斜向
        self.bishop_moves = [(2, 2), (2, -2), (-2, 2), (-2, -2)]  # 相/象：田字
        self.knight_moves = [  # 马：日字
            (1, 2), (-1, 2), (1, -2), (-1, -2),
            (2, 1), (2, -1), (-2, 1), (-2, -1)
        ]

        self._shape_rules: Dict[PieceKind, Callable] = {
            PieceKind.CHARIOT: self._shape_straight,
            PieceKind.CANNON: self._shape_straight,
            PieceKind.KNIGHT: self._shape_knight,
            PieceKind.BISHOP: self._shape_bishop,
            PieceKind.ADVISOR: self._shape_advisor,
            PieceKind.KING: self._shape_king,
            PieceKind.PAWN: self._shape_pawn,
        }
        self._path_rules: Dict[PieceKind, Callable] = {
            PieceKind.CHARIOT: self._path_chariot,
            PieceKind.CANNON: self._path_cannon,
            PieceKind.KNIGHT: self._path_knight,
            PieceKind.BISHOP: self._path_bishop,
            PieceKind.ADVISOR: self._path_palace,
            PieceKind.KING: self._path_palace,
            PieceKind.PAWN: lambda label, side, origin, destination: None,
        }

    # ==================== 公共接口 ====================

    def check_move(self, kind: PieceKind, side: Side, origin: Square,
                   destination: Square) -> Tuple[Square, Square]:
        """
        完整合法性检查

        Returns:
            Tuple[Square, Square]: (起点, 终点)

        Raises:
            GeometryError: 走法不合法
        """
        error = self.violation(kind, side, origin, destination, flying_guard=True)
        if error is not None:
            raise error
        return origin, destination

    def is_legal(self, kind: PieceKind, side: Side, origin: Square, destination: Square) -> bool:
        """完整合法性检查的布尔形式"""
        return self.violation(kind, side, origin, destination, flying_guard=True) is None

    def reaches(self, kind: PieceKind, side: Side, origin: Square, destination: Square) -> bool:
        """
        几何可达性

        不检查飞将，也允许落在对方帅/将上，用于判断棋子是否攻击某个位置。
        """
        return self.violation(kind, side, origin, destination, flying_guard=False) is None

    def violation(self, kind: PieceKind, side: Side, origin: Square, destination: Square,
                  flying_guard: bool = True) -> Optional[GeometryError]:
        """
        返回走法的第一条违例，合法时返回None

        Args:
            kind: 棋子类型
            side: 阵营
            origin: 起点
            destination: 终点
            flying_guard: 是否检查飞将及禁止吃帅/将
        """
        moving = self.board.piece_at(origin)
        if moving is None or moving.kind is not kind or moving.side is not side:
            raise InvariantViolation(f"{tuple(origin)} 上没有{side.display_name}的{glyph_of(kind, side)}")

        label = glyph_of(kind, side)
        if origin == destination:
            return GeometryError(f"{label}必须移动", GeometryError.BAD_SHAPE)

        error = self._shape_rules[kind](label, side, origin, destination)
        if error is not None:
            return error

        if not destination.in_bounds:
            return GeometryError(f"{label}不能出界", GeometryError.OUT_OF_BOUNDS)

        error = self._path_rules[kind](label, side, origin, destination)
        if error is not None:
            return error

        target = self.board.piece_at(destination)
        if target is not None and target.side is side:
            return GeometryError(f"{label}不能吃自己的棋子", GeometryError.SAME_SIDE_CAPTURE)

        if flying_guard:
            if target is not None and target.kind is PieceKind.KING:
                return GeometryError(f"不能吃掉{target.glyph}", GeometryError.KING_CAPTURE)
            if self.exposes_generals(origin, destination):
                return GeometryError("禁止飞将！", GeometryError.FLYING_GENERAL)

        return None

    def exposes_generals(self, origin: Square, destination: Square) -> bool:
        """
        飞将检测

        试走后若帅将同列且中间无子，返回True。
        """
        with self.board.probe():
            self.board.move_piece(origin, destination)
            red_king = self.board.find_king(Side.RED)
            black_king = self.board.find_king(Side.BLACK)
            return (red_king.file == black_king.file
                    and all(p is None for p in self.board.between_exclusive(red_king, black_king)))

    def candidate_destinations(self, kind: PieceKind, side: Side, origin: Square) -> List[Square]:
        """
        生成棋子所有形状上可能的终点（在棋盘内），不检查阻挡

        Args:
            kind: 棋子类型
            side: 阵营
            origin: 起点

        Returns:
            List[Square]: 候选终点
        """
        if kind in (PieceKind.CHARIOT, PieceKind.CANNON):
            squares = [Square(origin.file, rank) for rank in range(BOARD_RANKS) if rank != origin.rank]
            squares += [Square(file, origin.rank) for file in range(BOARD_FILES) if file != origin.file]
            return squares

        deltas = {
            PieceKind.KNIGHT: self.knight_moves,
            PieceKind.BISHOP: self.bishop_moves,
            PieceKind.ADVISOR: self.advisor_moves,
            PieceKind.KING: self.king_moves,
            PieceKind.PAWN: [(0, side.forward), (-1, 0), (1, 0)],
        }[kind]
        squares = [origin.offset(df, dr) for df, dr in deltas]
        return [square for square in squares if square.in_bounds]

    # ==================== 形状规则 ====================

    @staticmethod
    def _shape_straight(label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        if origin.file != destination.file and origin.rank != destination.rank:
            return GeometryError(f"{label}只能直线移动")
        return None

    @staticmethod
    def _shape_knight(label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        deltas = (abs(destination.file - origin.file), abs(destination.rank - origin.rank))
        if deltas not in ((2, 1), (1, 2)):
            return GeometryError(f"{label}只能走日字形")
        return None

    @staticmethod
    def _shape_bishop(label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        deltas = (abs(destination.file - origin.file), abs(destination.rank - origin.rank))
        if deltas != (2, 2):
            return GeometryError(f"{label}只能走田字")
        return None

    @staticmethod
    def _shape_advisor(label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        deltas = (abs(destination.file - origin.file), abs(destination.rank - origin.rank))
        if deltas != (1, 1):
            return GeometryError(f"{label}只能走斜线")
        return None

    @staticmethod
    def _shape_king(label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        deltas = (abs(destination.file - origin.file), abs(destination.rank - origin.rank))
        if deltas not in ((1, 0), (0, 1)):
            return GeometryError(f"{label}只能走一格")
        return None

    @staticmethod
    def _shape_pawn(label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        advance = (destination.rank - origin.rank) * side.forward
        sideways = abs(destination.file - origin.file)

        if advance > 1:
            return GeometryError(f"{label}最多只能前进一格")
        if advance < 0:
            return GeometryError(f"{label}不能后退")
        if sideways > 1:
            return GeometryError(f"{label}最多只能左右移动一格")
        if sideways and advance:
            return GeometryError(f"{label}不能斜向移动")
        if sideways and in_home_half(side, origin.rank):
            return GeometryError(f"{label}在己方领地内不能左右移动", GeometryError.RIVER_BOUNDARY)
        return None

    # ==================== 阻挡与区域规则 ====================

    def _path_chariot(self, label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        if any(p is not None for p in self.board.between_exclusive(origin, destination)):
            return GeometryError(f"{label}中间有棋子", GeometryError.OBSTRUCTED)
        return None

    def _path_cannon(self, label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        # 不吃子时中间必须无子，吃子时中间必须恰好一个炮架
        destination_empty = self.board.is_empty(destination)
        screens = sum(1 for p in self.board.between_exclusive(origin, destination) if p is not None)

        if destination_empty and screens != 0:
            return GeometryError(f"{label}不吃子时中间不能有棋子", GeometryError.OBSTRUCTED)
        if not destination_empty and screens != 1:
            return GeometryError(f"{label}和目标中间应当有且仅有一个棋子", GeometryError.OBSTRUCTED)
        return None

    def _path_knight(self, label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        df = destination.file - origin.file
        dr = destination.rank - origin.rank
        leg = origin.offset(_sign(df), 0) if abs(df) == 2 else origin.offset(0, _sign(dr))
        if not self.board.is_empty(leg):
            return GeometryError(f"{label}腿被堵住了", GeometryError.OBSTRUCTED)
        return None

    def _path_bishop(self, label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        if not in_home_half(side, destination.rank):
            return GeometryError(f"{label}不能过河", GeometryError.RIVER_BOUNDARY)
        eye = origin.offset((destination.file - origin.file) // 2, (destination.rank - origin.rank) // 2)
        if not self.board.is_empty(eye):
            return GeometryError(f"{label}眼被堵住了", GeometryError.OBSTRUCTED)
        return None

    @staticmethod
    def _path_palace(label: str, side: Side, origin: Square, destination: Square) -> Optional[GeometryError]:
        if not in_palace(side, destination):
            return GeometryError(f"{label}只能在九宫格内", GeometryError.PALACE_BOUNDARY)
        return None


def knight_leg(knight: Square, target: Square) -> Square:
    """马从 knight 走到 target 时的马腿位置"""
    df = target.file - knight.file
    dr = target.rank - knight.rank
    return knight.offset(_sign(df), 0) if abs(df) == 2 else knight.offset(0, _sign(dr))

"""
将军检测

判断帅/将是否被将军、是否被将死、是否困毙，并枚举合法走法。

所有假设走法都在 board.probe() 中试走并回滚，真实棋盘不受影响。
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from .board import ChessBoard
from .move import Move
from .pieces import PieceKind, Side, Square
from .rule_engine import RuleEngine, knight_leg
from ..utils.exceptions import InvalidGeometryError
from ..utils.logger import LoggerMixin


Checker = Tuple[PieceKind, Square]


class CheckEngine(LoggerMixin):
    """
    将军检测引擎

    只有车、马、炮、兵/卒能将军；帅/将照面由规则引擎作为非法走法拒绝。
    """

    ATTACKER_KINDS = (PieceKind.CHARIOT, PieceKind.KNIGHT, PieceKind.CANNON, PieceKind.PAWN)

    # 拦截或吃掉将军棋子时尝试的棋子顺序
    DEFENDER_ORDER = (
        PieceKind.CHARIOT, PieceKind.KNIGHT, PieceKind.BISHOP,
        PieceKind.ADVISOR, PieceKind.CANNON, PieceKind.PAWN,
    )

    def __init__(self, board: ChessBoard, rule_engine: Optional[RuleEngine] = None):
        """
        初始化将军检测引擎

        Args:
            board: 棋盘
            rule_engine: 规则引擎，为None时新建
        """
        self.board = board
        self.rule_engine = rule_engine or RuleEngine(board)

        self._escape_strategies = {
            PieceKind.CANNON: self._escape_cannon,
            PieceKind.CHARIOT: self._escape_chariot,
            PieceKind.KNIGHT: self._escape_knight,
            PieceKind.PAWN: self._escape_pawn,
        }

    # ==================== 将军 ====================

    def checkers(self, side: Side) -> List[Checker]:
        """
        找出正在将 side 的军的全部对方棋子

        Returns:
            List[Checker]: (棋子类型, 位置) 列表
        """
        king = self.board.find_king(side)
        attacker = side.opponent
        found = []
        for kind in self.ATTACKER_KINDS:
            for square in self.board.positions_of(kind, attacker):
                if self.rule_engine.reaches(kind, attacker, square, king):
                    found.append((kind, square))
        return found

    def is_in_check(self, side: Side) -> bool:
        return bool(self.checkers(side))

    def is_safe_after(self, side: Side, origin: Square, destination: Square) -> bool:
        """试走 origin -> destination 后 side 的帅/将是否不被将军"""
        with self.board.probe():
            self.board.move_piece(origin, destination)
            return not self.checkers(side)

    def is_playable(self, side: Side, origin: Square, destination: Square) -> bool:
        """
        走法是否完全合法：规则引擎接受且走后己方不被将军
        """
        piece = self.board.piece_at(origin)
        if piece is None or piece.side is not side:
            return False
        if not self.rule_engine.is_legal(piece.kind, side, origin, destination):
            return False
        return self.is_safe_after(side, origin, destination)

    # ==================== 将死 ====================

    def is_checkmate(self, side: Side, checkers: Optional[Sequence[Checker]] = None) -> bool:
        """
        判断 side 是否被将死

        先尝试帅/将走一步；双将时无法同时化解，直接判负；
        单将时按将军棋子的类型尝试拦截或吃子。

        Args:
            side: 被将军的一方
            checkers: 已知的将军棋子，为None时重新计算
        """
        if checkers is None:
            checkers = self.checkers(side)
        if not checkers:
            return False

        if self._king_can_escape(side):
            return False

        if len(checkers) > 1:
            self.log_debug(f"{side.display_name}被双将且帅/将无路可走")
            return True

        kind, square = checkers[0]
        return not self._escape_strategies[kind](side, square)

    def _king_can_escape(self, side: Side) -> bool:
        king = self.board.find_king(side)
        for destination in self.rule_engine.candidate_destinations(PieceKind.KING, side, king):
            if self.is_playable(side, king, destination):
                self.log_debug(f"{side.display_name}帅/将可以走到 {tuple(destination)}")
                return True
        return False

    def _any_defender_reaches(self, side: Side, target: Square) -> bool:
        """是否有己方棋子 (帅/将除外) 能走到 target 并解除将军"""
        for kind in self.DEFENDER_ORDER:
            for square in self.board.positions_of(kind, side):
                if self.is_playable(side, square, target):
                    self.log_debug(f"{side.display_name} {tuple(square)} -> {tuple(target)} 可以解将")
                    return True
        return False

    def _escape_cannon(self, side: Side, cannon: Square) -> bool:
        king = self.board.find_king(side)
        line = line_between(cannon, king)
        screen = next(square for square in line if not self.board.is_empty(square))

        # 炮架是己方棋子时，先尝试把它移开
        screen_piece = self.board.piece_at(screen)
        if screen_piece.side is side:
            for destination in self.rule_engine.candidate_destinations(screen_piece.kind, side, screen):
                if self.is_playable(side, screen, destination):
                    return True

        for square in line:
            if square != screen and self.board.is_empty(square):
                if self._any_defender_reaches(side, square):
                    return True

        return self._any_defender_reaches(side, cannon)

    def _escape_chariot(self, side: Side, chariot: Square) -> bool:
        king = self.board.find_king(side)
        for square in line_between(chariot, king):
            if self._any_defender_reaches(side, square):
                return True
        return self._any_defender_reaches(side, chariot)

    def _escape_knight(self, side: Side, knight: Square) -> bool:
        leg = knight_leg(knight, self.board.find_king(side))
        if self.board.is_empty(leg) and self._any_defender_reaches(side, leg):
            return True
        return self._any_defender_reaches(side, knight)

    def _escape_pawn(self, side: Side, pawn: Square) -> bool:
        return self._any_defender_reaches(side, pawn)

    # ==================== 困毙与走法枚举 ====================

    def is_stalemate(self, side: Side, full_search: bool = False) -> bool:
        """
        判断 side 是否困毙

        默认只看帅/将能否走一步；full_search 为True时还要求所有棋子都无合法走法。
        """
        if self.checkers(side):
            return False
        if self._king_can_escape(side):
            return False
        if full_search:
            return next(self.iter_legal_moves(side), None) is None
        return True

    def iter_legal_moves(self, side: Side) -> Iterator[Move]:
        """逐个生成 side 的全部合法走法"""
        for origin, piece in self.board.get_all_pieces(side):
            for destination in self.rule_engine.candidate_destinations(piece.kind, side, origin):
                if self.is_playable(side, origin, destination):
                    yield Move(piece.kind, side, origin, destination)

    def generate_legal_moves(self, side: Side) -> List[Move]:
        """
        生成 side 的全部合法走法

        Returns:
            List[Move]: 合法走法列表
        """
        return list(self.iter_legal_moves(side))


def line_between(a: Square, b: Square) -> List[Square]:
    """同列或同行的两个位置之间的格子，不包含两端"""
    if a.file == b.file:
        low, high = sorted((a.rank, b.rank))
        return [Square(a.file, rank) for rank in range(low + 1, high)]
    if a.rank == b.rank:
        low, high = sorted((a.file, b.file))
        return [Square(file, a.rank) for file in range(low + 1, high)]
    raise InvalidGeometryError(a, b)

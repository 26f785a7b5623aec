"""
裁判

规则引擎对外的唯一入口：解析指令、检查合法性、走子、判断将军/将死/困毙，
并记录历史以便悔棋。

Referee 独占唯一的真实棋盘；外部只能通过 piece_at/positions_of 等只读接口观察。
轮到谁走、何时允许悔棋由调用方决定。
"""

from dataclasses import replace
from typing import List, Optional, Tuple

import numpy as np

from .board import ChessBoard
from .check_engine import CheckEngine
from .history import Instruction, MoveHistory
from .move import Move
from .notation import NotationParser
from .outcomes import Capture, CheckDelivered, Checkmate, MoveOutcome, MoveResult, Moved, Stalemate
from .pieces import Piece, PieceKind, Side, Square
from .rule_engine import RuleEngine
from ..config.engine_config import RulesConfig
from ..utils.exceptions import InvariantViolation, ParseError, RuleViolation, SelfCheckError
from ..utils.logger import LoggerMixin


class Referee(LoggerMixin):
    """
    象棋裁判

    Examples:
        >>> referee = Referee()
        >>> result = referee.apply_move("炮二平五", Side.RED)
        >>> result.success
        True
    """

    def __init__(self, board: Optional[ChessBoard] = None, config: Optional[RulesConfig] = None,
                 fen: Optional[str] = None):
        """
        初始化裁判

        Args:
            board: 初始棋盘，为None时使用标准开局
            config: 规则配置
            fen: FEN局面，与board互斥

        Raises:
            InvariantViolation: FEN局面不合法
        """
        if board is not None and fen is not None:
            raise ValueError("board 与 fen 不能同时指定")

        if fen is not None:
            try:
                board = ChessBoard(fen)
            except ValueError as e:
                raise InvariantViolation("FEN局面无法解析", str(e))
            is_valid, errors = board.validate_board_state()
            if not is_valid:
                raise InvariantViolation("FEN局面不合法", "; ".join(errors))

        self.board = board if board is not None else ChessBoard()
        self.config = config if config is not None else RulesConfig()

        self.rule_engine = RuleEngine(self.board)
        self.check_engine = CheckEngine(self.board, self.rule_engine)
        self.parser = NotationParser(self.board)
        self._history = MoveHistory()

        # 上一步之后被将军的一方
        self._in_check: Optional[Side] = None
        for side in Side:
            if self.check_engine.is_in_check(side):
                self._in_check = side
        if self._in_check is not None and self._in_check is not self.board.side_to_move:
            self.log_warning(f"局面中{self._in_check.display_name}被将军，但轮到{self.board.side_to_move.display_name}走棋")

    # ==================== 规则开关 ====================

    @property
    def auto_checkmate_detection(self) -> bool:
        return self.config.auto_checkmate_detection

    @auto_checkmate_detection.setter
    def auto_checkmate_detection(self, enabled: bool):
        self.config.auto_checkmate_detection = bool(enabled)

    @property
    def auto_stalemate_detection(self) -> bool:
        return self.config.auto_stalemate_detection

    @auto_stalemate_detection.setter
    def auto_stalemate_detection(self, enabled: bool):
        self.config.auto_stalemate_detection = bool(enabled)

    @property
    def full_stalemate_search(self) -> bool:
        return self.config.full_stalemate_search

    @full_stalemate_search.setter
    def full_stalemate_search(self, enabled: bool):
        self.config.full_stalemate_search = bool(enabled)

    # ==================== 走子 ====================

    def apply_move(self, text: str, side: Side) -> MoveResult:
        """
        按记法走子

        Args:
            text: 中文纵线记法指令，如 "炮二平五"
            side: 行棋方

        Returns:
            MoveResult: 成功时为有序的结果列表，失败时为原因，棋盘不变
        """
        try:
            move = self.parser.parse(text, side)
            outcomes = self._commit(move)
        except RuleViolation as e:
            self.log_debug(f"拒绝{side.display_name}的走法 {text!r}: {e}")
            return MoveResult.failure(e)
        return MoveResult.ok(outcomes)

    def apply_squares(self, origin: Tuple[int, int], destination: Tuple[int, int]) -> MoveResult:
        """
        按坐标走子，行棋方为起点上棋子的一方

        Args:
            origin: 起点 (file, rank)
            destination: 终点 (file, rank)
        """
        origin, destination = Square(*origin), Square(*destination)
        try:
            piece = self.board.piece_at(origin) if origin.in_bounds else None
            if piece is None:
                raise ParseError("指定的位置没有棋子", ParseError.NO_PIECE_AT_ORIGIN)
            move = Move(piece.kind, piece.side, origin, destination)
            if destination.in_bounds:
                move = replace(move, text=move.to_chinese_notation(self.board))
            outcomes = self._commit(move)
        except RuleViolation as e:
            self.log_debug(f"拒绝走法 {tuple(origin)} -> {tuple(destination)}: {e}")
            return MoveResult.failure(e)
        return MoveResult.ok(outcomes)

    def _commit(self, move: Move) -> List[MoveOutcome]:
        """
        检查并提交走法

        Raises:
            GeometryError: 走法不合法
            SelfCheckError: 走后己方被将军
        """
        kind, side = move.kind, move.side
        opponent = side.opponent
        self.rule_engine.check_move(kind, side, move.origin, move.destination)

        board_before = self.board.snapshot()
        in_check_before = self._in_check

        with self.board.probe() as probe:
            captured = self.board.move_piece(move.origin, move.destination)
            if self.check_engine.checkers(side):
                if self._in_check is side:
                    raise SelfCheckError(f"{side.display_name}已被将军", SelfCheckError.ALREADY_IN_CHECK)
                raise SelfCheckError("这样走会导致被将军", SelfCheckError.EXPOSES_KING)
            opponent_checkers = self.check_engine.checkers(opponent)
            probe.commit()

        self._in_check = opponent if opponent_checkers else None
        self.board.side_to_move = opponent

        outcomes: List[MoveOutcome] = []
        record = Instruction(move.text, move.origin, move.destination, kind, side)

        if opponent_checkers:
            if self.auto_checkmate_detection and self.check_engine.is_checkmate(opponent, opponent_checkers):
                outcomes.append(Checkmate(opponent))
                record.checkmated = opponent
                self.log_info(f"{opponent.display_name}被将死")
            else:
                outcomes.append(CheckDelivered(opponent))
            record.check_delivered = opponent

        if captured is not None:
            outcomes.append(Capture(move.origin, move.destination, kind, side, captured.kind, captured.side))
            record.captured, record.captured_side = captured.kind, captured.side
        elif not opponent_checkers:
            outcomes.append(Moved(move.origin, move.destination, kind, side))

        if (not opponent_checkers and self.auto_stalemate_detection
                and self.check_engine.is_stalemate(opponent, full_search=self.full_stalemate_search)):
            outcomes.append(Stalemate(opponent))
            record.stalemated = opponent
            self.log_info(f"{opponent.display_name}困毙")

        self._history.record(record, board_before, in_check_before)
        self.log_info(f"{side.display_name} {move.text or move.to_coordinate_notation()}: "
                      f"{tuple(move.origin)} -> {tuple(move.destination)}")
        return outcomes

    def retract(self) -> Optional[Instruction]:
        """
        悔棋，撤销最近一步

        Returns:
            Optional[Instruction]: 被撤销的记录，没有可撤销的走法时为None
        """
        entry = self._history.pop()
        if entry is None:
            self.log_debug("没有可以撤销的走法")
            return None

        record, board_before, in_check_before = entry
        self.board.restore(board_before)
        self._in_check = in_check_before
        self.board.side_to_move = record.side
        self.log_info(f"撤销{record.side.display_name}的走法 {record.text}")
        return record

    # ==================== 只读查询 ====================

    def piece_at(self, square: Tuple[int, int]) -> Optional[Piece]:
        return self.board.piece_at(Square(*square))

    def positions_of(self, kind: PieceKind, side: Side) -> List[Square]:
        return self.board.positions_of(kind, side)

    def legal_moves(self, side: Side) -> List[Move]:
        """side 当前的全部合法走法，附带中文记法"""
        return [replace(m, text=m.to_chinese_notation(self.board))
                for m in self.check_engine.generate_legal_moves(side)]

    def is_in_check(self, side: Side) -> bool:
        return self.check_engine.is_in_check(side)

    @property
    def in_check(self) -> Optional[Side]:
        """上一步之后被将军的一方"""
        return self._in_check

    @property
    def history(self) -> Tuple[Instruction, ...]:
        return self._history.records

    @property
    def can_retract(self) -> bool:
        return self._history.can_retract

    def snapshot(self) -> np.ndarray:
        """棋盘矩阵的副本"""
        return self.board.snapshot()

    def fen(self) -> str:
        return self.board.to_fen()

    def render(self) -> str:
        return self.board.to_visual_string()

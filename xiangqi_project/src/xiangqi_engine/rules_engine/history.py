"""
走子历史

记录每一步已提交的走法，并保存最近一步之前的棋盘，用于悔棋。
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .pieces import PieceKind, Side, Square


@dataclass
class Instruction:
    """一条走子记录"""
    text: str
    origin: Square
    destination: Square
    piece: PieceKind
    side: Side
    captured: Optional[PieceKind] = None
    captured_side: Optional[Side] = None
    check_delivered: Optional[Side] = None   # 被将军的一方
    checkmated: Optional[Side] = None        # 被将死的一方
    stalemated: Optional[Side] = None        # 困毙的一方

    def to_dict(self) -> dict:
        """转换为字典"""
        def name(value):
            return value.name if value is not None else None

        return {
            'text': self.text,
            'origin': tuple(self.origin),
            'destination': tuple(self.destination),
            'piece': self.piece.name,
            'side': self.side.name,
            'captured': name(self.captured),
            'captured_side': name(self.captured_side),
            'check_delivered': name(self.check_delivered),
            'checkmated': name(self.checkmated),
            'stalemated': name(self.stalemated),
        }


class MoveHistory:
    """
    走子历史

    所有记录都会保留以便显示，但只有最近一步可以悔棋。
    """

    def __init__(self):
        self._records: List[Instruction] = []
        # (走子前的棋盘, 走子前被将军的一方)
        self._snapshot: Optional[Tuple[np.ndarray, Optional[Side]]] = None

    def record(self, instruction: Instruction, board_before: np.ndarray, in_check_before: Optional[Side]):
        """
        记录一步已提交的走法

        Args:
            instruction: 走子记录
            board_before: 走子前的棋盘矩阵
            in_check_before: 走子前被将军的一方
        """
        self._records.append(instruction)
        self._snapshot = (board_before.copy(), in_check_before)

    def pop(self) -> Optional[Tuple[Instruction, np.ndarray, Optional[Side]]]:
        """
        取出最近一步及其之前的状态

        Returns:
            (记录, 走子前的棋盘, 走子前被将军的一方)，不能悔棋时为None
        """
        if self._snapshot is None:
            return None
        board_before, in_check_before = self._snapshot
        self._snapshot = None
        return self._records.pop(), board_before, in_check_before

    @property
    def can_retract(self) -> bool:
        return self._snapshot is not None

    @property
    def records(self) -> Tuple[Instruction, ...]:
        return tuple(self._records)

"""
走子结果

一次走子产生的有序事实列表，以及包装成功/失败的 MoveResult。
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .pieces import PieceKind, Side, Square
from ..utils.exceptions import RuleViolation


@dataclass(frozen=True)
class Moved:
    """普通走子，无吃子、无将军"""
    origin: Square
    destination: Square
    piece: PieceKind
    side: Side


@dataclass(frozen=True)
class Capture:
    """吃子"""
    origin: Square
    destination: Square
    capturer: PieceKind
    capturer_side: Side
    captured: PieceKind
    captured_side: Side


@dataclass(frozen=True)
class CheckDelivered:
    """side 的帅/将被将军"""
    side: Side


@dataclass(frozen=True)
class Checkmate:
    """side 被将死"""
    side: Side


@dataclass(frozen=True)
class Stalemate:
    """side 未被将军但帅/将无路可走"""
    side: Side


MoveOutcome = Union[Moved, Capture, CheckDelivered, Checkmate, Stalemate]


def describe(outcome: MoveOutcome) -> str:
    """将结果转换为中文描述"""
    if isinstance(outcome, Moved):
        return f"{outcome.side.display_name}走子 {tuple(outcome.origin)} -> {tuple(outcome.destination)}"
    if isinstance(outcome, Capture):
        return (f"{outcome.capturer_side.display_name}吃掉了"
                f"{outcome.captured_side.display_name}的棋子 {tuple(outcome.destination)}")
    if isinstance(outcome, CheckDelivered):
        return f"{outcome.side.display_name}被将军"
    if isinstance(outcome, Checkmate):
        return f"{outcome.side.display_name}被将死"
    if isinstance(outcome, Stalemate):
        return f"{outcome.side.display_name}困毙，和棋"
    raise TypeError(f"未知的走子结果: {outcome!r}")


@dataclass
class MoveResult:
    """
    走子结果

    成功时 outcomes 为有序事实列表；失败时 error 为被拒绝的原因，棋盘保持不变。
    """
    success: bool
    outcomes: List[MoveOutcome] = field(default_factory=list)
    error: Optional[RuleViolation] = None

    @classmethod
    def ok(cls, outcomes: List[MoveOutcome]) -> 'MoveResult':
        return cls(success=True, outcomes=list(outcomes))

    @classmethod
    def failure(cls, error: RuleViolation) -> 'MoveResult':
        return cls(success=False, error=error)

    @property
    def reason(self) -> Optional[str]:
        """失败原因的中文描述"""
        return self.error.message if self.error is not None else None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.error_code if self.error is not None else None

    @property
    def is_game_over(self) -> bool:
        """是否出现将死或困毙"""
        return any(isinstance(o, (Checkmate, Stalemate)) for o in self.outcomes)

    def __bool__(self) -> bool:
        return self.success

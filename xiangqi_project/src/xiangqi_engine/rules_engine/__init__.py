"""
象棋规则引擎模块

包含棋盘表示、记法解析、走法合法性、将军检测与走子历史。
"""

from .pieces import Side, PieceKind, Piece, Square
from .board import ChessBoard
from .board_validator import BoardValidator
from .move import Move, Direction
from .notation import NotationParser
from .rule_engine import RuleEngine
from .check_engine import CheckEngine
from .outcomes import (
    Moved, Capture, CheckDelivered, Checkmate, Stalemate, MoveOutcome, MoveResult,
)
from .history import Instruction, MoveHistory
from .referee import Referee

__all__ = [
    'Side', 'PieceKind', 'Piece', 'Square',
    'ChessBoard', 'BoardValidator', 'Move', 'Direction', 'NotationParser',
    'RuleEngine', 'CheckEngine',
    'Moved', 'Capture', 'CheckDelivered', 'Checkmate', 'Stalemate', 'MoveOutcome', 'MoveResult',
    'Instruction', 'MoveHistory', 'Referee',
]

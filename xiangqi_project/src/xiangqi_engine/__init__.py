"""
中国象棋规则引擎

校验并执行以中文纵线记法表示的走法，维护棋局状态，
检测将军、将死、困毙以及飞将。
"""

__version__ = "0.1.0"
__author__ = "Xiangqi Referee Team"

from .rules_engine import (
    ChessBoard, Move, RuleEngine, CheckEngine, NotationParser, Referee,
    Side, PieceKind, Piece, Square, MoveResult,
)
from .config import ConfigManager, RulesConfig, SystemConfig
from .utils import setup_logger, get_logger, XiangqiError

__all__ = [
    "__version__", "__author__",
    "ChessBoard", "Move", "RuleEngine", "CheckEngine", "NotationParser", "Referee",
    "Side", "PieceKind", "Piece", "Square", "MoveResult",
    "ConfigManager", "RulesConfig", "SystemConfig",
    "setup_logger", "get_logger", "XiangqiError",
]

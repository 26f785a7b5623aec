"""
象棋裁判系统 (Xiangqi Referee)

中国象棋规则引擎：解析中文纵线记法、校验走法、判定将军/将死/困毙。
"""

__version__ = "0.1.0"
__author__ = "Xiangqi Referee Team"
__description__ = "中国象棋规则引擎 - 记法解析、走法校验与将军判定"

from xiangqi_project.src import xiangqi_engine

__all__ = [
    "xiangqi_engine",
    "__version__",
    "__author__",
    "__description__",
]

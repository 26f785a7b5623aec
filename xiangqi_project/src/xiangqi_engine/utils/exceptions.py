"""
异常定义

定义象棋规则引擎的各种异常类型。

RuleViolation 及其子类表示可恢复的规则违例，由 Referee 转换为失败的
MoveResult 返回给调用方；InvariantViolation 表示调用方违反了内部协议，
属于程序缺陷，不会被引擎捕获。
"""


class XiangqiError(Exception):
    """
    象棋规则引擎基础异常

    所有象棋规则相关异常的基类。
    """

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class RuleViolation(XiangqiError):
    """
    规则违例

    走法因记法、几何或将军规则被拒绝。可恢复，不会中断对局。
    """


class ParseError(RuleViolation):
    """
    记法解析异常

    指令格式错误、汉字数字/方向/棋子名称无法识别，或找不到指定棋子。
    """

    ILLEGAL_NUMERAL = "ILLEGAL_NUMERAL"
    UNKNOWN_PIECE_NAME = "UNKNOWN_PIECE_NAME"
    NO_PIECE_AT_ORIGIN = "NO_PIECE_AT_ORIGIN"
    NO_SUCH_PIECE = "NO_SUCH_PIECE"
    UNKNOWN_DIRECTION = "UNKNOWN_DIRECTION"
    MALFORMED_INSTRUCTION = "MALFORMED_INSTRUCTION"

    def __init__(self, reason: str, error_code: str = MALFORMED_INSTRUCTION, instruction: str = ""):
        super().__init__(reason, error_code)
        self.reason = reason
        self.instruction = instruction


class GeometryError(RuleViolation):
    """
    走法几何异常

    走法不符合棋子的移动规则：形状错误、被阻挡、出界、吃己方棋子、
    飞将、吃掉对方帅/将，或越出九宫/河界。
    """

    BAD_SHAPE = "BAD_SHAPE"
    OBSTRUCTED = "OBSTRUCTED"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    SAME_SIDE_CAPTURE = "SAME_SIDE_CAPTURE"
    FLYING_GENERAL = "FLYING_GENERAL"
    PALACE_BOUNDARY = "PALACE_BOUNDARY"
    RIVER_BOUNDARY = "RIVER_BOUNDARY"
    KING_CAPTURE = "KING_CAPTURE"

    def __init__(self, reason: str, error_code: str = BAD_SHAPE):
        super().__init__(reason, error_code)
        self.reason = reason


class SelfCheckError(RuleViolation):
    """
    自将异常

    走法执行后己方帅/将仍被将军（已被将军）或因此被将军（送将）。
    """

    ALREADY_IN_CHECK = "ALREADY_IN_CHECK"
    EXPOSES_KING = "EXPOSES_KING"

    def __init__(self, reason: str, error_code: str = EXPOSES_KING):
        super().__init__(reason, error_code)
        self.reason = reason


class InvariantViolation(XiangqiError):
    """
    内部不变量被破坏

    例如在假定有棋子的位置上找不到棋子。这是调用方的程序缺陷。
    """

    def __init__(self, state_description: str, reason: str = ""):
        message = f"内部状态错误: {state_description}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, "INVARIANT_VIOLATION")
        self.state_description = state_description
        self.reason = reason


class InvalidGeometryError(InvariantViolation):
    """
    两个位置既不同列也不同行时请求它们之间的棋子。
    """

    def __init__(self, a, b):
        super().__init__(f"{tuple(a)} 与 {tuple(b)} 不在同一直线上")
        self.error_code = "INVALID_GEOMETRY"
        self.squares = (a, b)


class ConfigurationError(XiangqiError):
    """
    配置错误异常

    当配置参数无效时抛出。
    """

    def __init__(self, config_name: str, reason: str = ""):
        message = f"配置错误 - {config_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message, "CONFIG_ERROR")
        self.config_name = config_name
        self.reason = reason

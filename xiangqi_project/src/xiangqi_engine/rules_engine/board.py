"""
象棋棋盘数据结构

定义象棋棋盘的表示、只读查询、试探性修改与回滚，以及FEN格式转换。
"""

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .pieces import (
    BOARD_FILES, BOARD_RANKS, FEN_SYMBOLS, Piece, PieceKind, Side, Square,
)
from ..utils.exceptions import InvalidGeometryError, InvariantViolation


class BoardProbe:
    """试探句柄，调用 commit() 后退出上下文时保留修改"""

    def __init__(self):
        self.committed = False

    def commit(self):
        self.committed = True


class ChessBoard:
    """
    象棋棋盘类

    10x9 的整数矩阵，按 board[rank, file] 索引。红方棋子为正，黑方为负，0 为空。

    所有"假设走法"都在 probe() 上下文中进行：上下文内的每次写入都记入撤销日志，
    退出时按逆序回放，除非调用了 commit()。
    """

    EMPTY = 0

    # 初始局面 (红方在 rank 0 一侧)
    BACK_RANK = [5, 4, 3, 2, 1, 2, 3, 4, 5]  # 车马相士帅士相马车

    def __init__(self, fen: Optional[str] = None):
        """
        初始化棋盘

        Args:
            fen: FEN格式的棋局字符串，如果为None则创建初始局面
        """
        self.board = np.zeros((BOARD_RANKS, BOARD_FILES), dtype=int)

        # FEN中记录的行棋方，仅作元数据
        self.side_to_move = Side.RED

        # 撤销日志: (rank, file, 原编码)
        self._undo_log: List[Tuple[int, int, int]] = []
        self._probe_depth = 0

        if fen is not None:
            self.from_fen(fen)
        else:
            self._setup_initial_position()

    def _setup_initial_position(self):
        """设置象棋初始局面"""
        self.board[:] = 0

        # 红方
        self.board[0] = self.BACK_RANK
        self.board[2] = [0, 6, 0, 0, 0, 0, 0, 6, 0]         # 炮
        self.board[3] = [7, 0, 7, 0, 7, 0, 7, 0, 7]         # 兵

        # 黑方
        self.board[9] = [-code for code in self.BACK_RANK]
        self.board[7] = [0, -6, 0, 0, 0, 0, 0, -6, 0]       # 炮
        self.board[6] = [-7, 0, -7, 0, -7, 0, -7, 0, -7]    # 卒

        self.side_to_move = Side.RED

    # ==================== 只读查询 ====================

    def piece_at(self, square: Square) -> Optional[Piece]:
        """
        获取指定位置的棋子

        Args:
            square: 位置坐标

        Returns:
            Optional[Piece]: 棋子，空位返回None
        """
        if not square.in_bounds:
            raise InvariantViolation(f"查询越界位置 {tuple(square)}")
        return Piece.from_code(int(self.board[square.rank, square.file]))

    def is_empty(self, square: Square) -> bool:
        return self.piece_at(square) is None

    def positions_of(self, kind: PieceKind, side: Side) -> List[Square]:
        """
        获取指定棋子的所有位置

        按 file 升序、同列按 rank 升序排列，"前/后"的判定依赖此顺序。
        """
        code = Piece(kind, side).code
        ranks, files = np.nonzero(self.board == code)
        return sorted(Square(int(f), int(r)) for r, f in zip(ranks, files))

    def find_king(self, side: Side) -> Square:
        """找到指定阵营帅/将的位置"""
        positions = self.positions_of(PieceKind.KING, side)
        if not positions:
            raise InvariantViolation(f"{side.display_name}的帅/将不在棋盘上")
        return positions[0]

    def column(self, file: int) -> List[Optional[Piece]]:
        """获取一列，按 rank 从 0 到 9"""
        return [Piece.from_code(int(code)) for code in self.board[:, file]]

    def row(self, rank: int) -> List[Optional[Piece]]:
        """获取一行，按 file 从 0 到 8"""
        return [Piece.from_code(int(code)) for code in self.board[rank, :]]

    def between_exclusive(self, a: Square, b: Square) -> List[Optional[Piece]]:
        """
        获取两个位置之间的格子，不包含两端

        同列取列、同行取行，按坐标从小到大排列；相邻或相同时为空列表。

        Raises:
            InvalidGeometryError: 两个位置既不同列也不同行
        """
        if a.file == b.file:
            low, high = sorted((a.rank, b.rank))
            return self.column(a.file)[low + 1:high]
        if a.rank == b.rank:
            low, high = sorted((a.file, b.file))
            return self.row(a.rank)[low + 1:high]
        raise InvalidGeometryError(a, b)

    def get_all_pieces(self, side: Optional[Side] = None) -> List[Tuple[Square, Piece]]:
        """
        获取所有棋子的位置和类型

        Args:
            side: 指定阵营，None表示获取所有棋子
        """
        pieces = []
        for file in range(BOARD_FILES):
            for rank in range(BOARD_RANKS):
                piece = Piece.from_code(int(self.board[rank, file]))
                if piece is not None and (side is None or piece.side is side):
                    pieces.append((Square(file, rank), piece))
        return pieces

    def count_pieces(self, side: Optional[Side] = None) -> Dict[Piece, int]:
        """统计棋子数量"""
        counts: Dict[Piece, int] = {}
        for _, piece in self.get_all_pieces(side):
            counts[piece] = counts.get(piece, 0) + 1
        return counts

    # ==================== 修改与试探 ====================

    def _write(self, square: Square, code: int):
        if not square.in_bounds:
            raise InvariantViolation(f"写入越界位置 {tuple(square)}")
        if self._probe_depth:
            self._undo_log.append((square.rank, square.file, int(self.board[square.rank, square.file])))
        self.board[square.rank, square.file] = code

    def place(self, square: Square, piece: Optional[Piece]):
        """放置棋子，piece为None时清空该位置"""
        self._write(square, piece.code if piece is not None else self.EMPTY)

    def move_piece(self, origin: Square, destination: Square) -> Optional[Piece]:
        """
        移动棋子，不做任何规则检查

        Returns:
            Optional[Piece]: 被吃掉的棋子
        """
        piece = self.piece_at(origin)
        if piece is None:
            raise InvariantViolation(f"{tuple(origin)} 没有棋子")
        captured = self.piece_at(destination)
        self._write(origin, self.EMPTY)
        self._write(destination, piece.code)
        return captured

    @contextmanager
    def probe(self) -> Iterator[BoardProbe]:
        """
        试探性修改棋盘

        上下文内的修改在退出时回滚；调用 commit() 则保留。可以嵌套，
        内层提交的修改仍会被外层回滚。
        """
        mark = len(self._undo_log)
        handle = BoardProbe()
        self._probe_depth += 1
        try:
            yield handle
        finally:
            self._probe_depth -= 1
            if handle.committed:
                if self._probe_depth == 0:
                    del self._undo_log[mark:]
            else:
                self._rollback(mark)

    def _rollback(self, mark: int):
        while len(self._undo_log) > mark:
            rank, file, code = self._undo_log.pop()
            self.board[rank, file] = code

    def snapshot(self) -> np.ndarray:
        """棋盘矩阵的副本"""
        return self.board.copy()

    def restore(self, snapshot: np.ndarray):
        """从快照恢复棋盘"""
        if snapshot.shape != (BOARD_RANKS, BOARD_FILES):
            raise InvariantViolation(f"快照尺寸错误: {snapshot.shape}")
        self.board = snapshot.copy()

    # ==================== 格式转换 ====================

    def to_fen(self, side: Optional[Side] = None) -> str:
        """
        转换为FEN格式

        第一段从黑方底线 (rank 9) 写到红方底线 (rank 0)。
        """
        fen_parts = []
        for rank in range(BOARD_RANKS - 1, -1, -1):
            fen_row = ""
            empty_count = 0
            for piece in self.row(rank):
                if piece is None:
                    empty_count += 1
                    continue
                if empty_count > 0:
                    fen_row += str(empty_count)
                    empty_count = 0
                symbol = FEN_SYMBOLS[piece.kind]
                fen_row += symbol if piece.side is Side.RED else symbol.lower()
            if empty_count > 0:
                fen_row += str(empty_count)
            fen_parts.append(fen_row)

        side = side or self.side_to_move
        player_char = "w" if side is Side.RED else "b"
        return f"{'/'.join(fen_parts)} {player_char} - - 0 1"

    def from_fen(self, fen: str):
        """
        从FEN格式加载棋局

        Args:
            fen: FEN格式字符串，行棋方字段可省略
        """
        parts = fen.split()
        if not parts:
            raise ValueError("无效的FEN格式")

        rows = parts[0].split("/")
        if len(rows) != BOARD_RANKS:
            raise ValueError("FEN格式应包含10行")

        fen_to_piece = {}
        for kind, symbol in FEN_SYMBOLS.items():
            fen_to_piece[symbol] = Piece(kind, Side.RED)
            fen_to_piece[symbol.lower()] = Piece(kind, Side.BLACK)
        # 常见别名
        for alias, symbol in (('H', 'N'), ('E', 'B')):
            fen_to_piece[alias] = fen_to_piece[symbol]
            fen_to_piece[alias.lower()] = fen_to_piece[symbol.lower()]

        board = np.zeros((BOARD_RANKS, BOARD_FILES), dtype=int)
        for i, row in enumerate(rows):
            rank = BOARD_RANKS - 1 - i
            file = 0
            for char in row:
                if char.isdigit():
                    file += int(char)
                    continue
                if char not in fen_to_piece:
                    raise ValueError(f"FEN中包含未知棋子符号: {char}")
                if file >= BOARD_FILES:
                    raise ValueError(f"第{i + 1}行列数超出范围")
                board[rank, file] = fen_to_piece[char].code
                file += 1
            if file != BOARD_FILES:
                raise ValueError(f"第{i + 1}行列数应为9，实际为{file}")

        self.board = board
        self.side_to_move = Side.BLACK if len(parts) > 1 and parts[1] == "b" else Side.RED

    def to_visual_string(self) -> str:
        """
        转换为可视化字符串

        黑方在上，红方在下，列号按记法从 1 到 9。
        """
        lines = ["   " + " ".join(f"{n} " for n in range(1, BOARD_FILES + 1))]
        for rank in range(BOARD_RANKS - 1, -1, -1):
            cells = []
            for piece in self.row(rank):
                cells.append(piece.glyph if piece is not None else "＋")
            lines.append(f"{rank}  " + " ".join(cells))
            if rank == 5:
                lines.append("   " + "楚 河        汉 界".center(2 * BOARD_FILES + 8))
        return "\n".join(lines)

    # ==================== 棋局验证功能 ====================

    def validate_board_state(self) -> Tuple[bool, List[str]]:
        """
        验证棋局状态的合法性

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        from .board_validator import BoardValidator
        validator = BoardValidator()
        return validator.full_validation(self)

    def __str__(self) -> str:
        return self.to_visual_string()

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChessBoard):
            return False
        return np.array_equal(self.board, other.board)

    def __hash__(self) -> int:
        return hash(self.board.tobytes())

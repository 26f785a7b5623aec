"""
棋局合法性验证器

对从FEN载入的局面做结构性检查，保证规则引擎的前提成立。
"""

from typing import Any, Dict, List, Tuple

import numpy as np

from .board import ChessBoard
from .pieces import (
    BOARD_FILES, BOARD_RANKS, Piece, PieceKind, Side, in_home_half, in_palace,
)


class BoardValidator:
    """
    棋局合法性验证器

    提供各种棋局状态的验证功能。
    """

    def __init__(self):
        """初始化验证器"""
        # 棋子数量限制
        self.piece_limits = {
            PieceKind.KING: 1,
            PieceKind.ADVISOR: 2,
            PieceKind.BISHOP: 2,
            PieceKind.KNIGHT: 2,
            PieceKind.CHARIOT: 2,
            PieceKind.CANNON: 2,
            PieceKind.PAWN: 5,
        }

    def validate_board_structure(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证棋盘基本结构

        Args:
            board: 要验证的棋盘

        Returns:
            Tuple[bool, List[str]]: (是否合法, 错误信息列表)
        """
        errors = []

        if board.board.shape != (BOARD_RANKS, BOARD_FILES):
            errors.append(f"棋盘尺寸错误: {board.board.shape}, 应为(10, 9)")

        if not np.issubdtype(board.board.dtype, np.integer):
            errors.append(f"棋盘数据类型错误: {board.board.dtype}, 应为int")
        elif np.any(np.abs(board.board) > max(PieceKind)):
            errors.append("棋盘中包含未知的棋子编码")

        return len(errors) == 0, errors

    def validate_piece_counts(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证棋子数量

        每方必须有且只有一个帅/将，其余棋子不超过初始数量。
        """
        errors = []
        counts = board.count_pieces()

        for side in Side:
            for kind, limit in self.piece_limits.items():
                piece = Piece(kind, side)
                count = counts.get(piece, 0)
                if kind is PieceKind.KING and count != 1:
                    errors.append(f"{side.display_name}{piece.glyph}数量错误: {count}, 应为1")
                elif count > limit:
                    errors.append(f"{side.display_name}{piece.glyph}数量超限: {count} > {limit}")

        return len(errors) == 0, errors

    def validate_piece_positions(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证棋子位置的合法性

        帅/将、士只能在九宫内；相/象不能过河；兵/卒不能在出发线之后。
        """
        errors = []

        for square, piece in board.get_all_pieces():
            label = f"{piece.side.display_name}{piece.glyph}"
            if piece.kind in (PieceKind.KING, PieceKind.ADVISOR):
                if not in_palace(piece.side, square):
                    errors.append(f"{label}位置错误: {tuple(square)}, 应在九宫内")
            elif piece.kind is PieceKind.BISHOP:
                if not in_home_half(piece.side, square.rank):
                    errors.append(f"{label}过河: {tuple(square)}")
            elif piece.kind is PieceKind.PAWN:
                behind = square.rank < 3 if piece.side is Side.RED else square.rank > 6
                if behind:
                    errors.append(f"{label}位置错误: {tuple(square)}, 不能在出发线之后")

        return len(errors) == 0, errors

    def validate_kings_facing(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        验证帅将是否照面
        """
        errors = []

        red_kings = board.positions_of(PieceKind.KING, Side.RED)
        black_kings = board.positions_of(PieceKind.KING, Side.BLACK)

        if len(red_kings) == 1 and len(black_kings) == 1:
            red_king, black_king = red_kings[0], black_kings[0]
            if red_king.file == black_king.file:
                if all(p is None for p in board.between_exclusive(red_king, black_king)):
                    errors.append("帅将照面，中间无棋子阻挡")

        return len(errors) == 0, errors

    def full_validation(self, board: ChessBoard) -> Tuple[bool, List[str]]:
        """
        完整的棋局验证

        Returns:
            Tuple[bool, List[str]]: (是否合法, 所有错误信息列表)
        """
        all_errors = []

        validations = [
            self.validate_board_structure,
            self.validate_piece_counts,
            self.validate_piece_positions,
            self.validate_kings_facing,
        ]

        for validation_func in validations:
            _, errors = validation_func(board)
            all_errors.extend(errors)

        return len(all_errors) == 0, all_errors

    def get_validation_report(self, board: ChessBoard) -> Dict[str, Any]:
        """
        获取详细的验证报告

        Returns:
            Dict[str, Any]: 验证报告
        """
        report = {
            'overall_valid': True,
            'total_errors': 0,
            'validations': {}
        }

        validation_tests = {
            'structure': self.validate_board_structure,
            'piece_counts': self.validate_piece_counts,
            'piece_positions': self.validate_piece_positions,
            'kings_facing': self.validate_kings_facing,
        }

        for test_name, test_func in validation_tests.items():
            is_valid, errors = test_func(board)
            report['validations'][test_name] = {
                'valid': is_valid,
                'errors': errors,
                'error_count': len(errors)
            }

            if not is_valid:
                report['overall_valid'] = False
                report['total_errors'] += len(errors)

        return report

#!/usr/bin/env python3
"""
象棋裁判 主入口文件

提供命令行接口：交互对局、批量校验指令、列出合法走法。
"""

import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from xiangqi_project import __version__, __description__
from xiangqi_project.src.xiangqi_engine.config import ConfigManager, RulesConfig, SystemConfig
from xiangqi_project.src.xiangqi_engine.rules_engine import Referee, Side
from xiangqi_project.src.xiangqi_engine.rules_engine.outcomes import describe
from xiangqi_project.src.xiangqi_engine.utils import InvariantViolation, setup_logger_from_config

console = Console()

SIDE_CHOICES = {'red': Side.RED, 'black': Side.BLACK}
START_POSITION = 'startpos'


def print_banner():
    """打印项目横幅"""
    banner_text = Text()
    banner_text.append("♟ Xiangqi Referee ♟\n", style="bold red")
    banner_text.append(f"版本: {__version__}\n", style="green")
    banner_text.append(__description__, style="white")

    panel = Panel(
        banner_text,
        title="中国象棋裁判",
        title_align="center",
        border_style="red",
        padding=(1, 2)
    )
    console.print(panel)


def print_board(referee: Referee):
    console.print(Text(referee.render()))


def create_referee(fen: Optional[str], rules: RulesConfig) -> Referee:
    """按FEN创建裁判，FEN非法时退出"""
    try:
        if fen is None or fen == START_POSITION:
            return Referee(config=rules)
        return Referee(config=rules, fen=fen)
    except InvariantViolation as e:
        console.print(Text(f"局面无效: {e.message}", style="red"))
        sys.exit(2)


@click.group()
@click.version_option(version=__version__, prog_name="Xiangqi Referee")
def cli():
    """中国象棋裁判 - 中文纵线记法解析、走法校验与将军判定"""


@cli.command()
@click.option('--checkmate/--no-checkmate', default=None, help='是否自动判断将死')
@click.option('--stalemate/--no-stalemate', default=None, help='是否自动判断困毙')
@click.option('--fen', type=str, default=None, help='起始局面(FEN)，默认为标准开局')
@click.option('--config', 'config_dir', type=click.Path(file_okay=False), default=None,
              help='配置目录')
@click.option('--debug', is_flag=True, help='启用调试模式')
def play(checkmate: Optional[bool], stalemate: Optional[bool], fen: Optional[str],
         config_dir: Optional[str], debug: bool):
    """交互对局：从标准输入逐行读取指令，undo 悔棋，quit 退出"""
    rules, system = RulesConfig(), SystemConfig()
    if config_dir:
        manager = ConfigManager(config_dir)
        rules, system = manager.get_rules_config(), manager.get_system_config()

    if debug:
        system.log_level = 'DEBUG'
        console.print("[yellow]调试模式已启用[/yellow]")
    if debug or config_dir:
        setup_logger_from_config(system)

    if checkmate is not None:
        rules.auto_checkmate_detection = checkmate
    if stalemate is not None:
        rules.auto_stalemate_detection = stalemate

    referee = create_referee(fen, rules)
    side = referee.board.side_to_move
    print_board(referee)

    for line in sys.stdin:
        text = line.strip()
        if not text:
            continue
        if text in ('quit', 'exit'):
            break

        if text == 'undo':
            record = referee.retract()
            if record is None:
                console.print("[yellow]没有可以悔棋的走法[/yellow]")
                continue
            side = record.side
            console.print(Text(f"已撤销 {record.text}", style="yellow"))
            print_board(referee)
            continue

        result = referee.apply_move(text, side)
        if not result.success:
            console.print(Text(f"{side.display_name} {text}: {result.reason}", style="red"))
            continue

        for outcome in result.outcomes:
            console.print(Text(describe(outcome), style="green"))
        print_board(referee)

        if result.is_game_over:
            console.print("[bold]对局结束[/bold]")
            break
        side = side.opponent


@cli.command()
@click.argument('fen')
@click.argument('instructions', nargs=-1, required=True)
@click.option('--side', type=click.Choice(list(SIDE_CHOICES)), default='red', help='第一步的行棋方')
@click.option('--checkmate/--no-checkmate', default=True, help='是否自动判断将死')
@click.option('--stalemate/--no-stalemate', default=False, help='是否自动判断困毙')
def check(fen: str, instructions: Tuple[str, ...], side: str, checkmate: bool, stalemate: bool):
    """依次执行指令 (双方交替)，遇到第一条非法指令时以非零状态退出

    FEN 为 startpos 时使用标准开局。
    """
    rules = RulesConfig(auto_checkmate_detection=checkmate, auto_stalemate_detection=stalemate)
    referee = create_referee(fen, rules)
    mover = SIDE_CHOICES[side]

    for instruction in instructions:
        result = referee.apply_move(instruction, mover)
        if not result.success:
            console.print(Text(f"{mover.display_name} {instruction}: {result.reason} ({result.error_code})",
                               style="red"))
            sys.exit(1)
        facts = "，".join(describe(outcome) for outcome in result.outcomes)
        console.print(Text(f"{mover.display_name} {instruction}: {facts}"))
        mover = mover.opponent

    console.print(Text(referee.fen()))


@cli.command()
@click.argument('fen', default=START_POSITION)
@click.option('--side', type=click.Choice(list(SIDE_CHOICES)), default='red', help='行棋方')
def moves(fen: str, side: str):
    """列出局面下一方的全部合法走法"""
    referee = create_referee(fen, RulesConfig())
    legal = referee.legal_moves(SIDE_CHOICES[side])
    for move in legal:
        console.print(Text(f"{move.text}  {move.to_coordinate_notation()}"))
    console.print(f"共 {len(legal)} 种走法")


@cli.command()
def info():
    """显示系统信息"""
    print_banner()


def main():
    """主入口函数"""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]程序被用户中断[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()

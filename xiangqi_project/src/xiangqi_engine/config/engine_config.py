"""
引擎配置数据结构

定义规则开关、系统配置和默认参数。
"""

from dataclasses import dataclass


@dataclass
class RulesConfig:
    """规则配置"""
    auto_checkmate_detection: bool = False   # 将军后是否自动判断将死
    auto_stalemate_detection: bool = False   # 未将军时是否自动判断困毙
    full_stalemate_search: bool = False      # 困毙判断是否枚举全部棋子的走法


@dataclass
class SystemConfig:
    """系统配置"""
    # 日志配置
    log_level: str = 'INFO'             # 日志级别
    log_file: str = ''                  # 日志文件，为空时只输出到控制台
    log_dir: str = 'logs/xiangqi_engine'  # 日志目录
    log_max_size: int = 10              # 日志文件最大大小(MB)
    log_backup_count: int = 5           # 日志备份数量
    console_output: bool = True         # 是否输出到控制台


# 默认配置实例
DEFAULT_RULES_CONFIG = RulesConfig()
DEFAULT_SYSTEM_CONFIG = SystemConfig()

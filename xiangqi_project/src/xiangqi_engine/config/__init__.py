"""
配置管理模块

包含规则开关和系统配置。
"""

from .config_manager import ConfigManager
from .engine_config import RulesConfig, SystemConfig, DEFAULT_RULES_CONFIG, DEFAULT_SYSTEM_CONFIG

__all__ = ['ConfigManager', 'RulesConfig', 'SystemConfig', 'DEFAULT_RULES_CONFIG', 'DEFAULT_SYSTEM_CONFIG']

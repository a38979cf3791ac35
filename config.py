# -*- coding: utf-8 -*-
"""配置管理模块"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class ClientOptionsConfig(BaseModel):
    """MongoClient 连接参数"""
    server_selection_timeout_ms: int = Field(default=5000, description="服务器选择超时（毫秒）")
    connect_timeout_ms: int = Field(default=5000, description="连接超时（毫秒）")
    app_name: str = Field(default="mongo-harness", description="客户端应用名称")

    def to_client_kwargs(self) -> Dict[str, Any]:
        """转换为 MongoClient 关键字参数"""
        return {
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "connectTimeoutMS": self.connect_timeout_ms,
            "appname": self.app_name,
        }


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = Field(default="INFO", description="日志级别")
    format: str = Field(default="console", description="日志格式")
    file: Optional[str] = Field(default=None, description="日志文件路径")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        if v.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            raise ValueError('日志级别必须是 DEBUG/INFO/WARNING/ERROR/CRITICAL 之一')
        return v.upper()

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        if v not in ['json', 'console']:
            raise ValueError('日志格式必须是 json 或 console')
        return v


class HarnessSettings(BaseSettings):
    """MongoHarness 运行配置"""
    config_dir: Optional[str] = Field(default=None, description="夹具配置文件的额外搜索目录")
    client: ClientOptionsConfig = Field(default_factory=ClientOptionsConfig, description="客户端配置")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="日志配置")

    model_config = ConfigDict(
        env_prefix="MONGO_HARNESS_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, config_path: str) -> "HarnessSettings":
        """从YAML文件加载配置"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)


# 全局配置实例
settings: Optional[HarnessSettings] = None


def load_settings(config_path: Optional[str] = None) -> HarnessSettings:
    """加载配置，未指定文件时只读取环境变量"""
    global settings

    if config_path is None:
        config_path = os.getenv('MONGO_HARNESS_SETTINGS_PATH')

    if config_path:
        settings = HarnessSettings.from_yaml(config_path)
    else:
        settings = HarnessSettings()

    return settings


def get_settings() -> HarnessSettings:
    """获取当前配置，尚未加载时按默认方式加载"""
    if settings is None:
        return load_settings()
    return settings

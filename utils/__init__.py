#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MongoHarness工具包
提供统一异常定义和日志配置
"""

from .error_handler import (
    HarnessError,
    ValidationError,
    InvalidSequenceError,
    MissingConfigurationError,
    InvalidOperationError,
    ConfigurationLoadError,
    DataSourceError,
    ProvisioningError,
)
from .logger import setup_logging, setup_logging_from_config

__all__ = [
    'HarnessError',
    'ValidationError',
    'InvalidSequenceError',
    'MissingConfigurationError',
    'InvalidOperationError',
    'ConfigurationLoadError',
    'DataSourceError',
    'ProvisioningError',
    'setup_logging',
    'setup_logging_from_config'
]

__version__ = '1.0.0'

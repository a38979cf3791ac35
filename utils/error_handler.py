#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一异常定义

夹具配置错误必须让测试直接失败，因此这里的异常都不会在内部被吞掉或重试。
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional


class ErrorCategory(Enum):
    """错误分类"""
    VALIDATION = "validation"
    SEQUENCE = "sequence"
    CONFIGURATION = "configuration"
    LIFECYCLE = "lifecycle"
    DATA_SOURCE = "data_source"
    PROVISIONING = "provisioning"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """错误严重程度"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class HarnessError(Exception):
    """Harness基础异常类"""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN,
                 severity: ErrorSeverity = ErrorSeverity.MEDIUM,
                 details: Optional[dict] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now()
        self.trace_id = str(uuid.uuid4())[:8]

    def to_dict(self) -> dict:
        """转换为字典格式"""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "trace_id": self.trace_id,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestions": self.get_recovery_suggestions()
        }

    def get_recovery_suggestions(self) -> List[str]:
        """获取错误恢复建议"""
        suggestions = []

        if self.category == ErrorCategory.VALIDATION:
            suggestions.extend([
                "检查数据库和集合名称是否为空或重复",
                "确认每个数据库都设置了连接字符串",
                "需要初始化数据的集合必须提供数据源路径"
            ])
        elif self.category == ErrorCategory.SEQUENCE:
            suggestions.extend([
                "先调用 add_database() 再设置连接字符串或添加集合",
                "build() 之后不要继续使用同一个构建器"
            ])
        elif self.category == ErrorCategory.CONFIGURATION:
            suggestions.extend([
                "确认测试类上使用了 @harness_config 装饰器",
                "检查配置文件路径以及文件格式是否正确"
            ])
        elif self.category == ErrorCategory.LIFECYCLE:
            suggestions.extend([
                "每个 Harness 实例只能初始化一次，需要重新初始化时请创建新实例",
                "auto_run=True 时不要手动调用 build()"
            ])
        elif self.category == ErrorCategory.DATA_SOURCE:
            suggestions.extend([
                "检查数据文件是否存在且内容为合法的 JSON/YAML",
                "检查数据提供者引用格式: provider:package.module:ClassName"
            ])
        elif self.category == ErrorCategory.PROVISIONING:
            suggestions.extend([
                "检查MongoDB服务是否运行",
                "确认连接字符串是否正确"
            ])

        return suggestions


class ValidationError(HarnessError):
    """配置验证错误，携带全部违规项"""
    def __init__(self, violations: List[str], details: Optional[dict] = None):
        self.violations = list(violations)
        details = details or {}
        details["violations"] = self.violations
        message = "配置验证失败: " + "; ".join(self.violations)
        super().__init__(message, ErrorCategory.VALIDATION, ErrorSeverity.MEDIUM, details)


class InvalidSequenceError(HarnessError):
    """构建器调用顺序错误"""
    def __init__(self, message: str, operation: str, details: Optional[dict] = None):
        details = details or {}
        details["operation"] = operation
        super().__init__(message, ErrorCategory.SEQUENCE, ErrorSeverity.HIGH, details)


class MissingConfigurationError(HarnessError):
    """测试类缺少 harness_config 声明"""
    def __init__(self, message: str, type_name: str, details: Optional[dict] = None):
        details = details or {}
        details["type_name"] = type_name
        super().__init__(message, ErrorCategory.CONFIGURATION, ErrorSeverity.CRITICAL, details)


class InvalidOperationError(HarnessError):
    """当前状态不允许执行的操作"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCategory.LIFECYCLE, ErrorSeverity.HIGH, details)


class ConfigurationLoadError(HarnessError):
    """配置文件加载错误"""
    def __init__(self, message: str, details: Optional[dict] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCategory.CONFIGURATION, ErrorSeverity.HIGH, details, cause)


class DataSourceError(HarnessError):
    """初始化数据加载错误"""
    def __init__(self, message: str, source: str, details: Optional[dict] = None,
                 cause: Optional[Exception] = None):
        details = details or {}
        details["source"] = source
        super().__init__(message, ErrorCategory.DATA_SOURCE, ErrorSeverity.HIGH, details, cause)


class ProvisioningError(HarnessError):
    """数据库初始化过程中的驱动错误"""
    def __init__(self, message: str, database: str, details: Optional[dict] = None,
                 cause: Optional[Exception] = None):
        details = details or {}
        details["database"] = database
        super().__init__(message, ErrorCategory.PROVISIONING, ErrorSeverity.HIGH, details, cause)

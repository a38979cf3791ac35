# -*- coding: utf-8 -*-
"""
夹具配置构建器

以链式调用的方式组装 HarnessConfiguration::

    configuration = (
        SettingsBuilder()
        .add_database("test")
        .with_connection_string("mongodb://localhost:27017")
        .drop_database_first()
        .add_collection("people", True, "data/people.json")
        .build()
    )

构建器内部只有一个可变游标（当前数据库上下文），再次调用 add_database()
时上一个上下文被封存。所有验证推迟到 build() 时一次完成。
构建器不是线程安全的，build() 成功后不能再使用。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from settings.models import (
    DatabaseDescriptor,
    HarnessConfiguration,
    validate_databases,
)
from utils.error_handler import InvalidSequenceError, ValidationError


logger = structlog.get_logger(__name__)


@dataclass
class _DatabaseDraft:
    """尚未封存的数据库上下文"""
    name: Optional[str]
    connection_string: Optional[str] = None
    drop_first: bool = False
    collections: List[Dict[str, Any]] = field(default_factory=list)

    def seal(self) -> DatabaseDescriptor:
        """构造描述对象，字段类型由 pydantic 校验"""
        return DatabaseDescriptor(
            name="" if self.name is None else self.name,
            connection_string="" if self.connection_string is None else self.connection_string,
            drop_first=self.drop_first,
            collections=self.collections,
        )


def describe_type_errors(location: str, error: PydanticValidationError) -> List[str]:
    """把 pydantic 的字段错误转换为违规项描述"""
    violations = []
    for item in error.errors():
        path = location
        for part in item["loc"]:
            path += f"[{part}]" if isinstance(part, int) else f".{part}"
        violations.append(f"{path}: 字段类型错误: {item['msg']}")
    return violations


class SettingsBuilder:
    """HarnessConfiguration 链式构建器"""

    def __init__(self):
        self._sealed: List[_DatabaseDraft] = []
        self._current: Optional[_DatabaseDraft] = None
        self._built = False

    def add_database(self, name: str) -> "SettingsBuilder":
        """开始一个新的数据库上下文，上一个上下文随之封存"""
        self._ensure_not_built("add_database")
        if self._current is not None:
            self._sealed.append(self._current)
        self._current = _DatabaseDraft(name=name)
        return self

    def with_connection_string(self, connection_string: str) -> "SettingsBuilder":
        """设置当前数据库的连接字符串"""
        self._require_context("with_connection_string").connection_string = connection_string
        return self

    def drop_database_first(self) -> "SettingsBuilder":
        """使用前先删除当前数据库，重复调用无副作用"""
        self._require_context("drop_database_first").drop_first = True
        return self

    def add_collection(self, name: str, seed_on_create: bool = False,
                       data_source_path: Optional[str] = None) -> "SettingsBuilder":
        """
        向当前数据库追加集合

        Args:
            name: 集合名称
            seed_on_create: 是否写入初始化数据
            data_source_path: 数据文件路径或 provider:package.module:ClassName，
                seed_on_create 为 True 时必填（在 build() 时检查）
        """
        draft = self._require_context("add_collection")
        draft.collections.append({
            "name": "" if name is None else name,
            "seed_on_create": seed_on_create,
            "data_source_path": data_source_path,
        })
        return self

    def build(self) -> HarnessConfiguration:
        """
        封存最后一个上下文，执行完整验证并返回只读配置

        Raises:
            ValidationError: 包含全部违规项
        """
        self._ensure_not_built("build")

        drafts = list(self._sealed)
        if self._current is not None:
            drafts.append(self._current)

        databases: List[Optional[DatabaseDescriptor]] = []
        type_violations = []
        for index, draft in enumerate(drafts):
            try:
                databases.append(draft.seal())
            except PydanticValidationError as e:
                databases.append(None)
                type_violations.extend(describe_type_errors(f"databases[{index}]", e))

        violations = type_violations + validate_databases(databases)
        if violations:
            logger.warning("夹具配置验证失败", violation_count=len(violations))
            raise ValidationError(violations)

        self._built = True
        configuration = HarnessConfiguration(databases=tuple(databases))

        logger.debug(
            "夹具配置构建完成",
            database_count=len(databases),
            collection_count=sum(len(db.collections) for db in databases)
        )
        return configuration

    def _require_context(self, operation: str) -> _DatabaseDraft:
        self._ensure_not_built(operation)
        if self._current is None:
            raise InvalidSequenceError(
                f"调用 {operation}() 之前必须先调用 add_database()",
                operation=operation
            )
        return self._current

    def _ensure_not_built(self, operation: str) -> None:
        if self._built:
            raise InvalidSequenceError(
                f"构建器已经完成 build()，不能再调用 {operation}()",
                operation=operation
            )

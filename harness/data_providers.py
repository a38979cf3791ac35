# -*- coding: utf-8 -*-
"""
集合初始化数据来源

data_source_path 支持两种写法：

* 文件路径：.json 文件按 MongoDB 扩展 JSON 解析，.yaml/.yml 按 YAML 解析；
  文件内容可以是文档数组，也可以是单个文档。
* provider:package.module:ClassName：导入 DataProvider 子类并调用 get_data()。
"""

import dataclasses
import importlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from bson import json_util
from pydantic import BaseModel

from utils.error_handler import DataSourceError

PROVIDER_PREFIX = "provider:"


class DataProvider(ABC):
    """初始化数据提供者"""

    @abstractmethod
    def get_data(self) -> Iterable[Any]:
        """返回有限的记录序列"""


def to_document(record: Any) -> Dict[str, Any]:
    """把记录转换为可写入 MongoDB 的字典"""
    if isinstance(record, dict):
        return dict(record)
    if isinstance(record, BaseModel):
        return record.model_dump()
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.asdict(record)
    if hasattr(record, "__dict__"):
        return {key: value for key, value in vars(record).items() if not key.startswith("_")}
    raise TypeError(f"无法转换为文档的记录类型: {type(record).__name__}")


def import_provider(reference: str) -> DataProvider:
    """根据 package.module:ClassName 引用创建数据提供者"""
    module_name, _, attr_name = reference.partition(":")
    if not module_name or not attr_name:
        raise DataSourceError(
            f"数据提供者引用格式错误: {reference}", source=PROVIDER_PREFIX + reference
        )

    try:
        module = importlib.import_module(module_name)
        provider_class = getattr(module, attr_name)
    except (ImportError, AttributeError) as e:
        raise DataSourceError(
            f"无法导入数据提供者: {reference}", source=PROVIDER_PREFIX + reference, cause=e
        ) from e

    try:
        provider = provider_class()
    except Exception as e:
        raise DataSourceError(
            f"无法创建数据提供者: {reference}", source=PROVIDER_PREFIX + reference, cause=e
        ) from e

    if not callable(getattr(provider, "get_data", None)):
        raise DataSourceError(
            f"{reference} 没有实现 get_data()", source=PROVIDER_PREFIX + reference
        )
    return provider


def resolve_data_file(source: str, base_dir: Optional[Union[str, Path]] = None) -> Path:
    """相对路径先在 base_dir 中查找，再按当前工作目录查找"""
    path = Path(source)
    if path.is_absolute():
        return path
    if base_dir is not None:
        candidate = Path(base_dir) / path
        if candidate.exists():
            return candidate
    return Path.cwd() / path


def read_data_file(path: Path) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in ('.yaml', '.yml'):
            return yaml.safe_load(f)
        return json_util.loads(f.read())


def load_seed_documents(source: str, base_dir: Optional[Union[str, Path]] = None) -> List[Dict[str, Any]]:
    """
    加载集合的初始化文档

    Raises:
        DataSourceError: 数据来源不存在、无法解析或记录无法转换
    """
    if source.startswith(PROVIDER_PREFIX):
        provider = import_provider(source[len(PROVIDER_PREFIX):])
        try:
            records = provider.get_data()
            if records is not None and not isinstance(records, dict):
                records = list(records)
        except Exception as e:
            raise DataSourceError(
                f"数据提供者获取数据失败: {source}", source=source, cause=e
            ) from e
    else:
        path = resolve_data_file(source, base_dir)
        if not path.is_file():
            raise DataSourceError(f"数据文件不存在: {path}", source=source)
        try:
            records = read_data_file(path)
        except (ValueError, yaml.YAMLError, UnicodeDecodeError) as e:
            raise DataSourceError(f"数据文件格式错误: {path}", source=source, cause=e) from e

    if records is None:
        return []
    if isinstance(records, dict):
        records = [records]

    try:
        return [to_document(record) for record in records]
    except TypeError as e:
        raise DataSourceError(str(e), source=source, cause=e) from e

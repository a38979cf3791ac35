# -*- coding: utf-8 -*-
"""夹具配置数据模型"""

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CollectionDescriptor(BaseModel):
    """集合描述"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="集合名称")
    seed_on_create: bool = Field(default=False, description="创建时是否写入初始化数据")
    data_source_path: Optional[str] = Field(default=None, description="初始化数据来源")


class DatabaseDescriptor(BaseModel):
    """数据库描述"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="数据库名称")
    connection_string: str = Field(default="", description="连接字符串")
    drop_first: bool = Field(default=False, description="使用前是否先删除数据库")
    collections: Tuple[CollectionDescriptor, ...] = Field(default=(), description="集合列表")

    def get_collection(self, name: str) -> Optional[CollectionDescriptor]:
        """根据名称获取集合描述"""
        for collection in self.collections:
            if collection.name == name:
                return collection
        return None


class HarnessConfiguration(BaseModel):
    """完整的夹具配置，构建完成后只读"""
    model_config = ConfigDict(frozen=True)

    databases: Tuple[DatabaseDescriptor, ...] = Field(default=(), description="数据库列表")

    @property
    def database_names(self) -> List[str]:
        return [database.name for database in self.databases]

    def get_database(self, name: str) -> Optional[DatabaseDescriptor]:
        """根据名称获取数据库描述"""
        for database in self.databases:
            if database.name == name:
                return database
        return None


def validate_databases(databases: Sequence[Optional[DatabaseDescriptor]]) -> List[str]:
    """
    验证数据库描述列表

    返回全部违规项，而不是遇到第一个就停止。为 None 的条目表示字段类型错误、
    无法构造描述对象，由调用方单独报告，这里跳过。
    """
    violations = []
    seen_databases = set()

    for index, database in enumerate(databases):
        if database is None:
            continue
        location = f"databases[{index}]"

        if not database.name or not database.name.strip():
            violations.append(f"{location}: 数据库名称不能为空")
        elif database.name in seen_databases:
            violations.append(f"{location}: 数据库名称重复: {database.name}")
        else:
            seen_databases.add(database.name)

        if not database.connection_string or not database.connection_string.strip():
            violations.append(f"{location} ({database.name}): 缺少连接字符串")

        seen_collections = set()
        for col_index, collection in enumerate(database.collections):
            col_location = f"{location}.collections[{col_index}]"

            if not collection.name or not collection.name.strip():
                violations.append(f"{col_location}: 集合名称不能为空")
            elif collection.name in seen_collections:
                violations.append(
                    f"{col_location}: 数据库 {database.name} 中的集合名称重复: {collection.name}"
                )
            else:
                seen_collections.add(collection.name)

            if collection.seed_on_create and not collection.data_source_path:
                violations.append(
                    f"{col_location} ({collection.name}): 需要初始化数据但缺少数据源路径"
                )

    return violations

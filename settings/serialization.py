# -*- coding: utf-8 -*-
"""
夹具配置的持久化格式

文档结构::

    {
      "databases": [
        {
          "name": "test",
          "connection_string": "mongodb://localhost:27017",
          "drop_first": true,
          "collections": [
            {"name": "people", "seed_on_create": true, "data_source_path": "people.json"}
          ]
        }
      ]
    }

.yaml/.yml 文件使用相同结构。读取时通过 SettingsBuilder 重新构建，
因此文件配置与代码构建的配置经过同样的验证。
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from settings.builder import SettingsBuilder
from settings.models import HarnessConfiguration
from utils.error_handler import ConfigurationLoadError

YAML_SUFFIXES = ('.yaml', '.yml')

_FLAG = TypeAdapter(Optional[bool])
_TEXT = TypeAdapter(Optional[str])


def read_field(entry: Dict[str, Any], key: str, adapter: TypeAdapter, location: str,
               default: Any = None) -> Any:
    """
    读取文档字段并按类型校验

    布尔字段按 pydantic 规则转换，'false'、'no'、'0' 等字符串为 False，
    无法识别的值抛出 ConfigurationLoadError。缺省或 null 时返回 default。
    """
    try:
        value = adapter.validate_python(entry.get(key))
    except PydanticValidationError as e:
        raise ConfigurationLoadError(
            f"{location}.{key} 字段类型错误: {entry.get(key)!r}",
            details={"field": f"{location}.{key}"},
            cause=e
        ) from e
    return default if value is None else value


def configuration_to_dict(configuration: HarnessConfiguration) -> Dict[str, Any]:
    """转换为可序列化的字典"""
    return {
        "databases": [
            {
                "name": database.name,
                "connection_string": database.connection_string,
                "drop_first": database.drop_first,
                "collections": [
                    {
                        "name": collection.name,
                        "seed_on_create": collection.seed_on_create,
                        "data_source_path": collection.data_source_path,
                    }
                    for collection in database.collections
                ],
            }
            for database in configuration.databases
        ]
    }


def configuration_from_dict(data: Any) -> HarnessConfiguration:
    """
    从字典重建配置

    Raises:
        ConfigurationLoadError: 文档结构不正确
        ValidationError: 内容违反配置约束
    """
    if not isinstance(data, dict):
        raise ConfigurationLoadError("配置文档必须是对象", details={"type": type(data).__name__})

    databases = data.get("databases", [])
    if not isinstance(databases, list):
        raise ConfigurationLoadError("databases 必须是列表")

    builder = SettingsBuilder()
    for index, database in enumerate(databases):
        if not isinstance(database, dict):
            raise ConfigurationLoadError(f"databases[{index}] 必须是对象")

        location = f"databases[{index}]"
        builder.add_database(read_field(database, "name", _TEXT, location))
        builder.with_connection_string(read_field(database, "connection_string", _TEXT, location))
        if read_field(database, "drop_first", _FLAG, location, default=False):
            builder.drop_database_first()

        collections = database.get("collections") or []
        if not isinstance(collections, list):
            raise ConfigurationLoadError(f"databases[{index}].collections 必须是列表")

        for col_index, collection in enumerate(collections):
            if not isinstance(collection, dict):
                raise ConfigurationLoadError(
                    f"databases[{index}].collections[{col_index}] 必须是对象"
                )
            col_location = f"{location}.collections[{col_index}]"
            builder.add_collection(
                read_field(collection, "name", _TEXT, col_location),
                read_field(collection, "seed_on_create", _FLAG, col_location, default=False),
                read_field(collection, "data_source_path", _TEXT, col_location),
            )

    return builder.build()


def load_configuration(path: Union[str, Path]) -> HarnessConfiguration:
    """从 JSON 或 YAML 文件加载配置"""
    config_file = Path(path)
    if not config_file.is_file():
        raise ConfigurationLoadError(
            f"配置文件不存在: {config_file}", details={"path": str(config_file)}
        )

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            if config_file.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationLoadError(
            f"配置文件格式错误: {config_file}", details={"path": str(config_file)}, cause=e
        ) from e

    return configuration_from_dict(data)


def dump_configuration(configuration: HarnessConfiguration, path: Union[str, Path]) -> None:
    """保存配置到 JSON 或 YAML 文件"""
    config_file = Path(path)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    data = configuration_to_dict(configuration)

    with open(config_file, 'w', encoding='utf-8') as f:
        if config_file.suffix.lower() in YAML_SUFFIXES:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True,
                      indent=2, sort_keys=False)
        else:
            json.dump(data, f, ensure_ascii=False, indent=2)

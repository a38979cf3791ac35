# -*- coding: utf-8 -*-
"""
配置持久化单元测试
"""

import json

import pytest

from settings.builder import SettingsBuilder
from settings.serialization import (
    configuration_from_dict,
    configuration_to_dict,
    dump_configuration,
    load_configuration,
)
from utils.error_handler import ConfigurationLoadError, ValidationError


def build_example_configuration():
    return (
        SettingsBuilder()
        .add_database("test")
        .with_connection_string("conn")
        .drop_database_first()
        .add_collection("col1", True, "path1")
        .add_collection("col2", False)
        .add_database("test2")
        .with_connection_string("conn2")
        .add_collection("col1", True, "path1")
        .build()
    )


class TestConfigurationDict:
    """字典转换测试"""

    def test_to_dict_structure(self):
        """测试字典结构和字段名"""
        data = configuration_to_dict(build_example_configuration())

        assert [db["name"] for db in data["databases"]] == ["test", "test2"]
        first = data["databases"][0]
        assert first["connection_string"] == "conn"
        assert first["drop_first"] is True
        assert first["collections"][0] == {
            "name": "col1", "seed_on_create": True, "data_source_path": "path1"
        }

    def test_dict_round_trip(self):
        """测试构建器 -> 字典 -> 配置保持一致"""
        configuration = build_example_configuration()
        assert configuration_from_dict(configuration_to_dict(configuration)) == configuration

    def test_missing_optional_keys_use_defaults(self):
        """测试缺省字段使用默认值"""
        configuration = configuration_from_dict({
            "databases": [{"name": "test", "connection_string": "conn"}]
        })

        database = configuration.databases[0]
        assert database.drop_first is False
        assert database.collections == ()

    def test_invalid_document_reports_violations(self):
        """测试文档内容违反约束时报告全部违规项"""
        with pytest.raises(ValidationError) as exc_info:
            configuration_from_dict({
                "databases": [
                    {"name": "test", "connection_string": "conn"},
                    {"name": "test"}
                ]
            })

        assert len(exc_info.value.violations) == 2

    @pytest.mark.parametrize("document", [
        [],
        {"databases": {"name": "test"}},
        {"databases": ["test"]},
        {"databases": [{"name": "test", "connection_string": "c", "collections": "col1"}]},
        {"databases": [{"name": "test", "connection_string": ["c"]}]},
    ])
    def test_malformed_document(self, document):
        """测试结构错误的文档"""
        with pytest.raises(ConfigurationLoadError):
            configuration_from_dict(document)

    @pytest.mark.parametrize("flag", ["false", "False", "no", "0", 0, False, None])
    def test_false_like_flags(self, flag):
        """测试字符串形式的假值解析为 False"""
        configuration = configuration_from_dict({
            "databases": [{
                "name": "test",
                "connection_string": "conn",
                "drop_first": flag,
                "collections": [{"name": "col1", "seed_on_create": flag, "data_source_path": None}]
            }]
        })

        database = configuration.databases[0]
        assert database.drop_first is False
        assert database.collections[0].seed_on_create is False

    def test_true_like_flag(self):
        """测试字符串 'true' 解析为 True"""
        configuration = configuration_from_dict({
            "databases": [{"name": "test", "connection_string": "conn", "drop_first": "true"}]
        })

        assert configuration.databases[0].drop_first is True

    @pytest.mark.parametrize("entry, field", [
        ({"name": "test", "connection_string": "c", "drop_first": "maybe"},
         "databases[0].drop_first"),
        ({"name": "test", "connection_string": "c",
          "collections": [{"name": "col1", "seed_on_create": [True]}]},
         "databases[0].collections[0].seed_on_create"),
    ])
    def test_unrecognised_flag(self, entry, field):
        """测试无法识别的布尔取值"""
        with pytest.raises(ConfigurationLoadError) as exc_info:
            configuration_from_dict({"databases": [entry]})

        assert exc_info.value.details["field"] == field
        assert exc_info.value.cause is not None


class TestConfigurationFiles:
    """配置文件读写测试"""

    @pytest.mark.parametrize("file_name", ["fixture.json", "fixture.yaml", "fixture.yml"])
    def test_file_round_trip(self, tmp_path, file_name):
        """测试 JSON 与 YAML 文件读写一致"""
        configuration = build_example_configuration()
        path = tmp_path / "nested" / file_name

        dump_configuration(configuration, path)

        assert path.exists()
        assert load_configuration(path) == configuration

    def test_json_file_is_readable_document(self, tmp_path):
        """测试保存的 JSON 文件内容"""
        path = tmp_path / "fixture.json"
        dump_configuration(build_example_configuration(), path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["databases"][1]["name"] == "test2"

    def test_missing_file(self, tmp_path):
        """测试配置文件不存在"""
        with pytest.raises(ConfigurationLoadError) as exc_info:
            load_configuration(tmp_path / "missing.json")

        assert "missing.json" in exc_info.value.details["path"]

    def test_invalid_json(self, tmp_path):
        """测试 JSON 语法错误"""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationLoadError) as exc_info:
            load_configuration(path)

        assert exc_info.value.cause is not None

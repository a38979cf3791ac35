# -*- coding: utf-8 -*-
"""
Pytest配置文件
"""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def fake_harness_manager():
    """模拟初始化协作者，using_settings() 返回的构建器 build() 返回空映射"""
    fake_builder = MagicMock()
    fake_builder.build.return_value = {}

    fake_manager = MagicMock()
    fake_manager.using_settings.return_value = fake_builder
    return fake_manager


@pytest.fixture
def sample_config_document():
    """两个数据库的配置文档"""
    return {
        "databases": [
            {
                "name": "test",
                "connection_string": "mongodb://localhost:27017",
                "drop_first": True,
                "collections": [
                    {"name": "people", "seed_on_create": True, "data_source_path": "people.json"},
                    {"name": "empty", "seed_on_create": False, "data_source_path": None}
                ]
            },
            {
                "name": "test2",
                "connection_string": "mongodb://localhost:27018",
                "drop_first": False,
                "collections": []
            }
        ]
    }


@pytest.fixture
def config_dir(tmp_path, sample_config_document):
    """写入配置文件和数据文件的临时目录"""
    (tmp_path / "fixture.json").write_text(
        json.dumps(sample_config_document), encoding="utf-8"
    )
    (tmp_path / "people.json").write_text(
        json.dumps([
            {"first_name": "Peter", "last_name": "Venkman", "age": 31},
            {"first_name": "Ray", "last_name": "Stantz", "age": 32},
            {"first_name": "Egon", "last_name": "Spengler", "age": 33}
        ]),
        encoding="utf-8"
    )
    return tmp_path

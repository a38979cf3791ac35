# -*- coding: utf-8 -*-
"""测试类生命周期解析"""

import functools
from dataclasses import dataclass

import structlog

from harness.attributes import HarnessConfig, get_attribute
from utils.error_handler import MissingConfigurationError


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LifecycleDirective:
    """解析后的配置文件路径与运行模式"""
    config_file_path: str
    auto_run: bool


def default_config_file_path(cls: type) -> str:
    """没有显式路径时的默认配置文件名：<类名>.json"""
    return f"{cls.__name__}.json"


@functools.lru_cache(maxsize=None)
def resolve_lifecycle(cls: type) -> LifecycleDirective:
    """
    解析测试类的生命周期指令

    类自身或任一父类上必须有 @harness_config 标记；没有显式路径时
    默认使用 "<类名>.json"，类名取传入的具体类。

    Raises:
        MissingConfigurationError: 类及其父类都没有标记
    """
    marker = get_attribute(cls, HarnessConfig)
    if marker is None:
        raise MissingConfigurationError(
            f"{cls.__name__} 缺少 @harness_config 声明，无法确定配置文件",
            type_name=cls.__qualname__
        )

    directive = LifecycleDirective(
        config_file_path=marker.config_file_path or default_config_file_path(cls),
        auto_run=marker.auto_run,
    )
    logger.debug(
        "生命周期解析完成",
        type_name=cls.__qualname__,
        config_file_path=directive.config_file_path,
        auto_run=directive.auto_run
    )
    return directive

# -*- coding: utf-8 -*-
"""
测试类声明式标记

用法::

    @harness_config(config_file_path="people.json", auto_run=False)
    class PeopleTests(HarnessBase):
        ...

标记保存在类自身的 __harness_attributes__ 中，查找时沿 MRO 向上，
子类自动继承父类上的标记。
"""

from dataclasses import dataclass
from typing import List, Optional, Type, TypeVar

ATTRIBUTES_FIELD = "__harness_attributes__"

A = TypeVar("A")


@dataclass(frozen=True)
class HarnessConfig:
    """测试类的夹具配置声明"""
    config_file_path: Optional[str] = None
    auto_run: bool = True


def attach_attribute(cls: type, attribute: object) -> type:
    """把标记附加到类上（只写入类自身，不影响父类）"""
    own: List[object] = list(vars(cls).get(ATTRIBUTES_FIELD, ()))
    own.append(attribute)
    setattr(cls, ATTRIBUTES_FIELD, tuple(own))
    return cls


def harness_config(config_file_path: Optional[str] = None, auto_run: bool = True):
    """类装饰器：声明配置文件路径和是否在构造时自动初始化"""
    def decorator(cls: type) -> type:
        return attach_attribute(cls, HarnessConfig(config_file_path=config_file_path,
                                                   auto_run=auto_run))
    return decorator


def get_attribute(cls: type, attribute_type: Type[A]) -> Optional[A]:
    """沿 MRO 查找最近的指定类型标记，找不到返回 None"""
    for klass in cls.__mro__:
        for attribute in reversed(vars(klass).get(ATTRIBUTES_FIELD, ())):
            if isinstance(attribute, attribute_type):
                return attribute
    return None

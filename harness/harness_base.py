# -*- coding: utf-8 -*-
"""
测试夹具基类

子类通过 @harness_config 声明配置文件和运行模式::

    @harness_config(config_file_path="people.json")
    class PeopleFixture(HarnessBase):
        pass

    @pytest.fixture(scope="module")
    def people_db():
        fixture = PeopleFixture()
        yield fixture.get_database("test")
        fixture.close()

构造对象分两个阶段：先解析生命周期指令，再激活（调用
manager.using_settings(path).build()）。auto_run=True 时激活在构造函数中
同步完成，即“对象构造完毕 = 夹具已就绪”；auto_run=False 时需要显式调用一次
build()。每个实例最多初始化一次，需要重新初始化时创建新实例。
"""

import sys
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import structlog

from harness.lifecycle import LifecycleDirective, resolve_lifecycle
from harness.manager import HarnessManager, ProvisioningManager, close_clients
from utils.error_handler import InvalidOperationError


logger = structlog.get_logger(__name__)


class HarnessState(Enum):
    """夹具生命周期状态"""
    UNINITIALIZED = "uninitialized"
    RESOLVED = "resolved"
    PROVISIONED = "provisioned"


class HarnessBase:
    """MongoDB 测试夹具基类"""

    def __init__(self, harness_manager: Optional[ProvisioningManager] = None,
                 defer_activation: bool = False):
        """
        Args:
            harness_manager: 初始化协作者，默认使用 HarnessManager，
                并把子类所在模块的目录加入配置文件搜索路径
            defer_activation: 为 True 时即使 auto_run=True 也不在构造函数中
                初始化，由调用方稍后调用 activate()
        """
        self._state = HarnessState.UNINITIALIZED
        self._mongo_clients: Mapping[str, Any] = {}

        self.directive: LifecycleDirective = resolve_lifecycle(type(self))
        self._state = HarnessState.RESOLVED

        if harness_manager is None:
            harness_manager = self._default_manager()
        self.harness_manager = harness_manager

        if self.directive.auto_run and not defer_activation:
            self.activate()

    @property
    def state(self) -> HarnessState:
        return self._state

    @property
    def is_provisioned(self) -> bool:
        return self._state is HarnessState.PROVISIONED

    @property
    def mongo_clients(self) -> Mapping[str, Any]:
        """只读的 {数据库名称: 客户端} 映射，初始化之前为空"""
        return MappingProxyType(dict(self._mongo_clients))

    def build(self) -> Mapping[str, Any]:
        """
        手动触发初始化，仅适用于 auto_run=False

        Raises:
            InvalidOperationError: 已经初始化过，或 auto_run=True
        """
        if self.is_provisioned:
            raise InvalidOperationError(
                f"{type(self).__name__} 已经完成初始化，不能重复调用 build()",
                details={"state": self._state.value}
            )
        if self.directive.auto_run:
            raise InvalidOperationError(
                f"{type(self).__name__} 声明了 auto_run=True，不能手动调用 build()",
                details={"state": self._state.value, "auto_run": True}
            )
        return self.activate()

    def activate(self) -> Mapping[str, Any]:
        """
        激活阶段：调用初始化协作者并保存客户端

        Raises:
            InvalidOperationError: 已经初始化过
        """
        if self.is_provisioned:
            raise InvalidOperationError(
                f"{type(self).__name__} 已经完成初始化",
                details={"state": self._state.value}
            )

        logger.info(
            "开始初始化测试夹具",
            harness=type(self).__name__,
            config_file_path=self.directive.config_file_path
        )
        clients = self.harness_manager.using_settings(self.directive.config_file_path).build()

        self._mongo_clients = dict(clients)
        self._state = HarnessState.PROVISIONED
        return self.mongo_clients

    def get_database(self, name: str) -> Any:
        """获取已初始化的数据库对象"""
        if not self.is_provisioned:
            raise InvalidOperationError(
                f"{type(self).__name__} 尚未初始化",
                details={"state": self._state.value}
            )
        if name not in self._mongo_clients:
            raise InvalidOperationError(
                f"未配置的数据库: {name}",
                details={"database": name, "available": list(self._mongo_clients)}
            )
        return self._mongo_clients[name][name]

    def close(self) -> None:
        """关闭所有客户端连接，状态保持为 PROVISIONED"""
        close_clients(self._mongo_clients)

    def _default_manager(self) -> HarnessManager:
        search_paths = []
        module_file = getattr(sys.modules.get(type(self).__module__), "__file__", None)
        if module_file:
            search_paths.append(Path(module_file).parent)
        return HarnessManager(search_paths=search_paths)

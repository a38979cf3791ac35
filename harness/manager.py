# -*- coding: utf-8 -*-
"""
MongoDB 夹具初始化管理器

HarnessBase 只依赖两步调用的形式::

    clients = manager.using_settings(path).build()

HarnessManager 是基于 pymongo 的默认实现：按配置顺序为每个数据库创建客户端，
drop_first 时先删除数据库，再为需要初始化的集合写入数据。
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Union

import structlog
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from config import HarnessSettings, get_settings
from harness.data_providers import load_seed_documents
from settings.models import DatabaseDescriptor, HarnessConfiguration
from settings.serialization import load_configuration
from utils.error_handler import ConfigurationLoadError, ProvisioningError


logger = structlog.get_logger(__name__)


def close_clients(clients: Mapping[str, Any]) -> None:
    """关闭客户端连接，关闭失败只记录警告"""
    for name, client in clients.items():
        close = getattr(client, "close", None)
        if not callable(close):
            continue
        try:
            close()
        except PyMongoError as e:
            logger.warning("客户端连接关闭失败", database=name, error=str(e))
        else:
            logger.debug("客户端连接已关闭", database=name)


class ProvisioningManagerBuilder(Protocol):
    def build(self) -> Mapping[str, Any]:
        ...


class ProvisioningManager(Protocol):
    def using_settings(self, path: str) -> ProvisioningManagerBuilder:
        ...


class HarnessManagerBuilder:
    """持有已加载配置，build() 时执行实际的初始化"""

    def __init__(self, configuration: HarnessConfiguration,
                 client_factory: Callable[..., Any],
                 client_options: Optional[Dict[str, Any]] = None,
                 base_dir: Optional[Path] = None):
        self.configuration = configuration
        self.client_factory = client_factory
        self.client_options = client_options or {}
        self.base_dir = base_dir

    def build(self) -> Dict[str, Any]:
        """
        初始化全部数据库，返回 {数据库名称: 客户端}

        任一数据库失败时，已经创建的客户端全部关闭后再抛出异常。

        Raises:
            ProvisioningError: 驱动层错误
            DataSourceError: 初始化数据加载失败
        """
        clients: Dict[str, Any] = {}
        try:
            for database in self.configuration.databases:
                clients[database.name] = self._provision_database(database)
        except Exception:
            close_clients(clients)
            raise

        logger.info("夹具初始化完成", databases=list(clients.keys()))
        return clients

    def _provision_database(self, database: DatabaseDescriptor) -> Any:
        try:
            client = self.client_factory(database.connection_string, **self.client_options)
        except PyMongoError as e:
            raise self._provisioning_error(database, e) from e

        try:
            self._prepare_database(client, database)
        except PyMongoError as e:
            close_clients({database.name: client})
            raise self._provisioning_error(database, e) from e
        except Exception:
            close_clients({database.name: client})
            raise

        return client

    def _prepare_database(self, client: Any, database: DatabaseDescriptor) -> None:
        if database.drop_first:
            client.drop_database(database.name)
            logger.info("已删除数据库", database=database.name)

        for collection in database.collections:
            if not collection.seed_on_create:
                continue

            documents = load_seed_documents(collection.data_source_path, self.base_dir)
            if documents:
                client[database.name][collection.name].insert_many(documents)
            logger.info(
                "集合数据初始化完成",
                database=database.name,
                collection=collection.name,
                document_count=len(documents)
            )

    @staticmethod
    def _provisioning_error(database: DatabaseDescriptor, error: PyMongoError) -> ProvisioningError:
        logger.error("数据库初始化失败", database=database.name, error=str(error))
        return ProvisioningError(
            f"数据库 {database.name} 初始化失败: {error}", database=database.name, cause=error
        )


class HarnessManager:
    """基于 pymongo 的夹具初始化管理器"""

    def __init__(self, client_factory: Callable[..., Any] = MongoClient,
                 search_paths: Optional[Sequence[Union[str, Path]]] = None,
                 settings: Optional[HarnessSettings] = None):
        self.client_factory = client_factory
        self.search_paths = [Path(p) for p in (search_paths or [])]
        self.settings = settings or get_settings()

    def using_settings(self, path: str) -> HarnessManagerBuilder:
        """加载配置文件，数据文件的相对路径以配置文件所在目录为基准"""
        config_file = self.resolve_config_path(path)
        configuration = load_configuration(config_file)
        logger.debug("夹具配置已加载", path=str(config_file),
                     databases=configuration.database_names)
        return self._create_builder(configuration, config_file.parent)

    def using_configuration(self, configuration: HarnessConfiguration) -> HarnessManagerBuilder:
        """直接使用已构建的配置"""
        return self._create_builder(configuration, None)

    def resolve_config_path(self, path: str) -> Path:
        """
        查找配置文件

        绝对路径直接检查；相对路径依次在当前工作目录、search_paths、
        settings.config_dir 中查找。
        """
        config_file = Path(path)
        if config_file.is_absolute():
            if not config_file.is_file():
                raise ConfigurationLoadError(f"配置文件不存在: {path}", details={"path": path})
            return config_file

        candidates = self._candidate_paths(config_file)
        for candidate in candidates:
            if candidate.is_file():
                return candidate

        searched = [str(c) for c in candidates]
        raise ConfigurationLoadError(
            f"配置文件不存在: {path}\n已搜索:\n  - " + "\n  - ".join(searched),
            details={"path": path, "searched": searched}
        )

    def _candidate_paths(self, config_file: Path) -> List[Path]:
        directories = [Path.cwd(), *self.search_paths]
        if self.settings.config_dir:
            directories.append(Path(self.settings.config_dir))
        return [directory / config_file for directory in directories]

    def _create_builder(self, configuration: HarnessConfiguration,
                        base_dir: Optional[Path]) -> HarnessManagerBuilder:
        return HarnessManagerBuilder(
            configuration,
            self.client_factory,
            client_options=self.settings.client.to_client_kwargs(),
            base_dir=base_dir,
        )

# -*- coding: utf-8 -*-
"""MongoDB 测试夹具模块"""

from harness.attributes import HarnessConfig, get_attribute, harness_config
from harness.data_providers import DataProvider, load_seed_documents
from harness.harness_base import HarnessBase, HarnessState
from harness.lifecycle import LifecycleDirective, resolve_lifecycle
from harness.manager import (
    HarnessManager,
    HarnessManagerBuilder,
    ProvisioningManager,
    ProvisioningManagerBuilder,
)

__all__ = [
    "HarnessConfig",
    "get_attribute",
    "harness_config",
    "DataProvider",
    "load_seed_documents",
    "HarnessBase",
    "HarnessState",
    "LifecycleDirective",
    "resolve_lifecycle",
    "HarnessManager",
    "HarnessManagerBuilder",
    "ProvisioningManager",
    "ProvisioningManagerBuilder",
]

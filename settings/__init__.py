# -*- coding: utf-8 -*-
"""夹具配置模块"""

from settings.builder import SettingsBuilder
from settings.models import (
    CollectionDescriptor,
    DatabaseDescriptor,
    HarnessConfiguration,
    validate_databases,
)
from settings.serialization import (
    configuration_from_dict,
    configuration_to_dict,
    dump_configuration,
    load_configuration,
)

__all__ = [
    "SettingsBuilder",
    "CollectionDescriptor",
    "DatabaseDescriptor",
    "HarnessConfiguration",
    "validate_databases",
    "configuration_from_dict",
    "configuration_to_dict",
    "dump_configuration",
    "load_configuration",
]

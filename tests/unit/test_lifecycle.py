# -*- coding: utf-8 -*-
"""
声明式标记与生命周期解析单元测试
"""

import pytest

from harness.attributes import HarnessConfig, attach_attribute, get_attribute, harness_config
from harness.lifecycle import LifecycleDirective, resolve_lifecycle
from utils.error_handler import ErrorCategory, MissingConfigurationError


@harness_config()
class MarkedClass:
    pass


class UnmarkedClass:
    pass


class OtherAttribute:
    pass


class ClassWithOtherAttribute:
    pass


attach_attribute(ClassWithOtherAttribute, OtherAttribute())


@harness_config(config_file_path="TestPath", auto_run=False)
class ExplicitPathClass:
    pass


class InheritsExplicitPath(ExplicitPathClass):
    pass


@harness_config()
class InheritsAndOverrides(ExplicitPathClass):
    pass


@harness_config(config_file_path="mixin.json")
class MarkerMixin:
    pass


class UsesMixin(UnmarkedClass, MarkerMixin):
    pass


class TestGetAttribute:
    """标记查找测试"""

    def test_class_with_marker(self):
        """测试带标记的类返回标记"""
        result = get_attribute(MarkedClass, HarnessConfig)

        assert result is not None
        assert isinstance(result, HarnessConfig)

    def test_class_without_marker(self):
        """测试没有标记的类返回 None"""
        assert get_attribute(UnmarkedClass, HarnessConfig) is None

    def test_class_with_different_marker(self):
        """测试只有其他类型标记时返回 None"""
        assert get_attribute(ClassWithOtherAttribute, HarnessConfig) is None
        assert isinstance(get_attribute(ClassWithOtherAttribute, OtherAttribute), OtherAttribute)

    def test_marker_is_inherited(self):
        """测试子类继承父类标记"""
        assert get_attribute(InheritsExplicitPath, HarnessConfig).config_file_path == "TestPath"

    def test_nearest_marker_wins(self):
        """测试子类标记优先于父类标记"""
        assert get_attribute(InheritsAndOverrides, HarnessConfig).config_file_path is None

    def test_marker_found_on_mixin(self):
        """测试沿完整 MRO 查找"""
        assert get_attribute(UsesMixin, HarnessConfig).config_file_path == "mixin.json"

    def test_decorator_does_not_touch_parent(self):
        """测试子类装饰不影响父类"""
        assert get_attribute(ExplicitPathClass, HarnessConfig).auto_run is False
        assert get_attribute(InheritsAndOverrides, HarnessConfig).auto_run is True


class TestResolveLifecycle:
    """生命周期解析测试"""

    def test_missing_marker(self):
        """测试没有标记时抛出异常"""
        with pytest.raises(MissingConfigurationError) as exc_info:
            resolve_lifecycle(UnmarkedClass)

        assert exc_info.value.category == ErrorCategory.CONFIGURATION
        assert exc_info.value.details["type_name"] == "UnmarkedClass"

    def test_default_path_uses_type_name(self):
        """测试没有显式路径时默认为 <类名>.json"""
        directive = resolve_lifecycle(MarkedClass)

        assert directive == LifecycleDirective(config_file_path="MarkedClass.json", auto_run=True)

    def test_explicit_path_and_auto_run(self):
        """测试显式路径和 auto_run"""
        directive = resolve_lifecycle(ExplicitPathClass)

        assert directive.config_file_path == "TestPath"
        assert directive.auto_run is False

    def test_inherited_marker_keeps_explicit_path(self):
        """测试继承标记时保留显式路径"""
        assert resolve_lifecycle(InheritsExplicitPath).config_file_path == "TestPath"

    def test_inherited_marker_default_path_uses_concrete_type(self):
        """测试继承的标记没有路径时使用具体子类名称"""

        class ConcreteSuite(MarkedClass):
            pass

        assert resolve_lifecycle(ConcreteSuite).config_file_path == "ConcreteSuite.json"

    def test_resolution_is_memoized(self):
        """测试同一类型的解析结果被缓存"""
        assert resolve_lifecycle(MarkedClass) is resolve_lifecycle(MarkedClass)

import inspect
import logging
import sys
from collections.abc import Iterator, Mapping
from types import ModuleType
from typing import Any

logger = logging.getLogger(__name__)

_NAME_ATTRS = ("displayName", "display_name", "__name__")
_MISSING = object()


class ModuleScanRegistry:
    """
    在已加载模块中按属性或名称查找宿主对象。

    默认扫描 sys.modules；查找只读，不会导入新模块。
    """

    def __init__(self, modules: Mapping[str, Any] | None = None) -> None:
        self._modules = modules

    def find_by_props(self, *names: str) -> Any | None:
        if not names:
            return None
        for candidate in self._iter_candidates():
            if all(_has_attr(candidate, name) for name in names):
                return candidate
        return None

    def find_by_name(self, name: str) -> Any | None:
        for candidate in self._iter_candidates():
            for attr in _NAME_ATTRS:
                if _safe_getattr(candidate, attr) == name:
                    return candidate
        return None

    def _iter_candidates(self) -> Iterator[Any]:
        modules = self._modules if self._modules is not None else sys.modules
        # sys.modules 可能在遍历时被其他线程修改，先取快照
        for module in list(modules.values()):
            if module is None:
                continue
            if not _is_dynamic(module):
                yield module
            if not isinstance(module, ModuleType):
                continue
            for value in list(vars(module).values()):
                if value is module or isinstance(value, ModuleType) or _is_dynamic(value):
                    continue
                yield value


def _safe_getattr(obj: Any, name: str) -> Any:
    try:
        return getattr(obj, name, None)
    except Exception:  # noqa: BLE001
        return None


def _has_attr(obj: Any, name: str) -> bool:
    # 只认真正定义过的属性，不触发模块级或实例级的动态 __getattr__
    try:
        if inspect.getattr_static(obj, name, _MISSING) is _MISSING:
            return False
    except Exception:  # noqa: BLE001
        return False
    return _safe_getattr(obj, name) is not None


def _is_dynamic(obj: Any) -> bool:
    """类型定义了 __getattr__ 的对象对任意属性名都有返回值，不能参与匹配。"""
    return any("__getattr__" in vars(klass) for klass in type(obj).__mro__)

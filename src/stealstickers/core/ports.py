from collections.abc import Callable, Sequence
from typing import Any, Protocol

from stealstickers.core.models import Severity

AfterCallback = Callable[[Sequence[Any], Any], Any]
Unpatch = Callable[[], None]


class ModuleRegistry(Protocol):
    def find_by_name(self, name: str) -> Any | None:
        """按声明名称查找已加载的模块或组件。"""

    def find_by_props(self, *names: str) -> Any | None:
        """查找同时暴露全部属性名的已加载模块。"""


class Patcher(Protocol):
    def after(self, method_name: str, target: Any, callback: AfterCallback) -> Unpatch:
        """在目标方法返回后执行回调，返回用于撤销拦截的句柄。"""


class DownloadSink(Protocol):
    async def save(self, url: str, filename: str) -> None:
        """将 url 指向的内容保存为 filename，失败时抛出异常。"""


class UrlOpener(Protocol):
    async def open(self, url: str) -> None:
        """在浏览器中打开 url。"""


class Notifier(Protocol):
    def notify(self, message: str, severity: Severity | None = None) -> None:
        """显示一条短暂提示。"""

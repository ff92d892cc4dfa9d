import logging
import threading

from stealstickers.services.interception import InterceptionHandle, InterceptionManager
from stealstickers.services.resolver import TargetResolver

logger = logging.getLogger(__name__)


class LifecycleController:
    """
    管理拦截的启用与撤销，只有 Inactive 与 Active 两种状态。

    - activate：对每个解析到的目标尝试挂载，收集全部句柄；零个目标时依然进入 Active
    - deactivate：先原子地取走并清空句柄集合，再逐个撤销，单个失败不影响其他
    """

    def __init__(self, resolver: TargetResolver, manager: InterceptionManager) -> None:
        self._resolver = resolver
        self._manager = manager
        self._lock = threading.Lock()
        self._handles: list[InterceptionHandle] | None = None

    @property
    def active(self) -> bool:
        return self._handles is not None

    @property
    def handles(self) -> tuple[InterceptionHandle, ...]:
        return tuple(self._handles or ())

    def activate(self) -> int:
        """返回本次挂载成功的拦截数量。已处于 Active 时先撤销旧的拦截。"""
        if self.active:
            logger.info("重复启用，先撤销已有拦截")
            self.deactivate()

        handles: list[InterceptionHandle] = []
        for target in self._resolver.resolve_targets():
            try:
                handles.append(self._manager.attach(target))
            except Exception:  # noqa: BLE001
                logger.warning(
                    "挂载拦截失败，跳过该目标: strategy=%s lookup=%s",
                    target.strategy,
                    target.lookup,
                    exc_info=True,
                )

        with self._lock:
            self._handles = handles

        if not handles:
            logger.warning("没有挂载任何拦截，稍后重新启用时会再次尝试")
        else:
            logger.info("拦截已启用: count=%s", len(handles))
        return len(handles)

    def deactivate(self) -> int:
        """返回本次撤销的句柄数量；重复调用时为 0。"""
        with self._lock:
            handles, self._handles = self._handles, None

        if not handles:
            return 0

        for handle in handles:
            try:
                handle.reverse()
            except Exception:  # noqa: BLE001
                # 宿主组件可能已经被卸载
                logger.warning("撤销拦截失败: %r", handle, exc_info=True)

        logger.info("拦截已撤销: count=%s", len(handles))
        return len(handles)

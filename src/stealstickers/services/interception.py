import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any

from stealstickers.core.errors import NoPatchableMethodError
from stealstickers.core.models import ActionEntry, ResolvedTarget, StickerDescriptor
from stealstickers.core.ports import Patcher, Unpatch
from stealstickers.services.extractor import extract, get_field
from stealstickers.services.splicer import DEFAULT_MAX_DEPTH, splice

logger = logging.getLogger(__name__)

ActionFactory = Callable[[StickerDescriptor], ActionEntry]

DEFAULT_METHOD_CANDIDATES: tuple[str, ...] = ("getActions", "buildActions", "default")


class InterceptionHandle:
    """撤销一次拦截；重复调用 reverse 只会生效一次。"""

    def __init__(self, target: ResolvedTarget, method_name: str, unpatch: Unpatch) -> None:
        self.target = target
        self.method_name = method_name
        self._unpatch: Unpatch | None = unpatch
        self._lock = threading.Lock()

    @property
    def reversed(self) -> bool:
        return self._unpatch is None

    def reverse(self) -> None:
        with self._lock:
            unpatch, self._unpatch = self._unpatch, None
        if unpatch is not None:
            unpatch()

    def __repr__(self) -> str:
        return (
            f"InterceptionHandle(lookup={self.target.lookup!r}, "
            f"method={self.method_name!r}, reversed={self.reversed})"
        )


class InterceptionManager:
    """把目标模块的方法挂上后置回调，在返回的菜单里追加下载操作。"""

    def __init__(
        self,
        patcher: Patcher,
        action_factory: ActionFactory,
        method_candidates: Sequence[str] = DEFAULT_METHOD_CANDIDATES,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._patcher = patcher
        self._action_factory = action_factory
        self._method_candidates = tuple(method_candidates)
        self._max_depth = max_depth

    def attach(self, target: ResolvedTarget) -> InterceptionHandle:
        method_name = self._pick_method(target.module)
        unpatch = self._patcher.after(method_name, target.module, self._augment)
        logger.info(
            "已挂载拦截: strategy=%s lookup=%s method=%s",
            target.strategy,
            target.lookup,
            method_name,
        )
        return InterceptionHandle(target, method_name, unpatch)

    def _pick_method(self, module: Any) -> str:
        for name in self._method_candidates:
            if callable(get_field(module, name)):
                return name
        raise NoPatchableMethodError(
            f"模块上没有可拦截的方法，候选: {', '.join(self._method_candidates)}"
        )

    def _augment(self, args: Sequence[Any], ret: Any) -> Any:
        try:
            descriptor = find_descriptor(args)
            if descriptor is None:
                return ret

            entry = self._action_factory(descriptor)
            if not splice(ret, entry, max_depth=self._max_depth):
                logger.debug("未能注入下载操作: sticker=%s", descriptor.id)
            return ret
        except Exception:  # noqa: BLE001
            # 回调运行在宿主渲染路径里，任何异常都不能外抛
            logger.exception("处理拦截回调失败，返回原始结果")
            return ret


def find_descriptor(args: Sequence[Any]) -> StickerDescriptor | None:
    """依次尝试首个参数本身、其 sticker 字段、其 message 字段。"""
    if not args:
        return None
    first = args[0]
    for candidate in (first, get_field(first, "sticker"), get_field(first, "message")):
        descriptor = extract(candidate)
        if descriptor is not None:
            return descriptor
    return None

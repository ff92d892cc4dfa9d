import functools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from stealstickers.core.ports import AfterCallback, Unpatch

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _PatchSlot:
    target: Any
    method_name: str
    original: Any
    owned: bool
    callbacks: list[tuple[object, AfterCallback]] = field(default_factory=list)


class Patcher:
    """
    通过替换属性实现的后置拦截。

    同一 (target, method) 上的多次注册共用一个包装函数，回调按注册顺序执行，
    前一个回调的非 None 返回值会作为后一个回调看到的返回值。
    每次注册都返回独立的撤销函数；最后一个回调撤销后恢复原始属性。
    单个回调抛错时记录日志并跳过，不影响后续回调和宿主。
    """

    def __init__(self) -> None:
        self._slots: dict[tuple[int, str], _PatchSlot] = {}
        self._lock = threading.RLock()

    def after(self, method_name: str, target: Any, callback: AfterCallback) -> Unpatch:
        with self._lock:
            key = (id(target), method_name)
            slot = self._slots.get(key)
            if slot is None:
                slot = self._install(target, method_name)
                self._slots[key] = slot

            token = object()
            slot.callbacks.append((token, callback))

        def unpatch() -> None:
            self._remove(key, token)

        return unpatch

    def is_patched(self, target: Any, method_name: str) -> bool:
        return (id(target), method_name) in self._slots

    def _install(self, target: Any, method_name: str) -> _PatchSlot:
        original = getattr(target, method_name)
        if not callable(original):
            raise TypeError(f"{method_name} 不可调用，无法拦截")

        own_attrs = getattr(target, "__dict__", None)
        owned = own_attrs is not None and method_name in own_attrs
        slot = _PatchSlot(
            target=target,
            method_name=method_name,
            original=own_attrs[method_name] if owned else original,
            owned=owned,
        )

        @functools.wraps(original)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            ret = original(*args, **kwargs)
            for _, callback in list(slot.callbacks):
                try:
                    result = callback(args, ret)
                except Exception:  # noqa: BLE001
                    logger.exception("后置回调执行失败，已跳过: method=%s", method_name)
                    continue
                if result is not None:
                    ret = result
            return ret

        setattr(target, method_name, wrapper)
        logger.debug("已替换方法: target=%s method=%s", type(target).__name__, method_name)
        return slot

    def _remove(self, key: tuple[int, str], token: object) -> None:
        with self._lock:
            slot = self._slots.get(key)
            if slot is None:
                return
            remaining = [item for item in slot.callbacks if item[0] is not token]
            if len(remaining) == len(slot.callbacks):
                return
            slot.callbacks[:] = remaining
            if remaining:
                return

            del self._slots[key]
            if slot.owned:
                setattr(slot.target, slot.method_name, slot.original)
            else:
                delattr(slot.target, slot.method_name)
            logger.debug(
                "已恢复方法: target=%s method=%s",
                type(slot.target).__name__,
                slot.method_name,
            )

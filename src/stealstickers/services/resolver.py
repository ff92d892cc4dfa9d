import logging
from collections.abc import Sequence

from stealstickers.core.models import ResolvedTarget
from stealstickers.core.ports import ModuleRegistry

logger = logging.getLogger(__name__)

DEFAULT_NAME_CANDIDATES: tuple[str, ...] = (
    "MessageLongPressActionSheet",
    "StickerDetailActionSheet",
    "MessageActionSheet",
)
DEFAULT_PROPS_CANDIDATES: tuple[tuple[str, ...], ...] = (
    ("markAsUnread", "suppressEmbeds"),
    ("openStickerPickerActionSheet",),
    ("getStickerById",),
    ("fetchSticker",),
)


class TargetResolver:
    """
    定位需要拦截的宿主模块。

    名称查找与属性查找两种策略互不短路：宿主可能同时通过多个入口暴露同一能力，
    所有命中的模块都会返回。同一个模块对象只返回一次，以先命中的策略为准。
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        name_candidates: Sequence[str] = DEFAULT_NAME_CANDIDATES,
        props_candidates: Sequence[Sequence[str]] = DEFAULT_PROPS_CANDIDATES,
    ) -> None:
        self._registry = registry
        self._name_candidates = tuple(name_candidates)
        self._props_candidates = tuple(tuple(props) for props in props_candidates)

    def resolve_targets(self) -> list[ResolvedTarget]:
        targets: list[ResolvedTarget] = []
        seen: set[int] = set()

        for candidate in self._resolve_by_name(), self._resolve_by_props():
            if candidate is None:
                continue
            if id(candidate.module) in seen:
                logger.debug(
                    "模块已由其他策略命中，跳过: strategy=%s lookup=%s",
                    candidate.strategy,
                    candidate.lookup,
                )
                continue
            seen.add(id(candidate.module))
            targets.append(candidate)

        if not targets:
            logger.info("未找到可拦截的目标模块，界面可能尚未加载")
        return targets

    def _resolve_by_name(self) -> ResolvedTarget | None:
        for name in self._name_candidates:
            try:
                module = self._registry.find_by_name(name)
            except Exception:  # noqa: BLE001
                logger.warning("按名称查找模块失败: name=%s", name, exc_info=True)
                continue
            if module is not None:
                logger.debug("按名称命中模块: name=%s", name)
                return ResolvedTarget(module=module, strategy="name", lookup=name)
        return None

    def _resolve_by_props(self) -> ResolvedTarget | None:
        for props in self._props_candidates:
            lookup = ",".join(props)
            try:
                module = self._registry.find_by_props(*props)
            except Exception:  # noqa: BLE001
                logger.warning("按属性查找模块失败: props=%s", lookup, exc_info=True)
                continue
            if module is not None:
                logger.debug("按属性命中模块: props=%s", lookup)
                return ResolvedTarget(module=module, strategy="props", lookup=lookup)
        return None

import asyncio
import logging

from stealstickers.adapters.browser import WebBrowserOpener
from stealstickers.adapters.http_sink import HttpDownloadSink
from stealstickers.adapters.module_registry import ModuleScanRegistry
from stealstickers.adapters.notifier import LoggingNotifier
from stealstickers.adapters.patcher import Patcher
from stealstickers.config import Settings
from stealstickers.core.models import ActionEntry, StickerDescriptor
from stealstickers.core.ports import DownloadSink, ModuleRegistry, Notifier, UrlOpener
from stealstickers.core.ports import Patcher as PatcherPort
from stealstickers.services.dispatcher import TaskDispatcher
from stealstickers.services.downloader import StickerDownloader
from stealstickers.services.interception import InterceptionManager
from stealstickers.services.lifecycle import LifecycleController
from stealstickers.services.resolver import TargetResolver
from stealstickers.utils.logging import setup_logging

logger = logging.getLogger(__name__)


class StealStickersPlugin:
    """插件外壳：on_load 启用拦截，on_unload 撤销拦截。两者都不会向宿主抛出异常。"""

    def __init__(
        self,
        registry: ModuleRegistry,
        patcher: PatcherPort,
        notifier: Notifier,
        sink: DownloadSink | None = None,
        url_opener: UrlOpener | None = None,
        settings: Settings | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.dispatcher = TaskDispatcher(loop)
        self.downloader = StickerDownloader(sink=sink, notifier=notifier, url_opener=url_opener)
        self.controller = LifecycleController(
            resolver=TargetResolver(registry),
            manager=InterceptionManager(
                patcher=patcher,
                action_factory=self._build_action,
                max_depth=self.settings.splice_max_depth,
            ),
        )

    def on_load(self) -> None:
        try:
            self.controller.activate()
            logger.info("StealStickers 已启用 📥")
        except Exception:  # noqa: BLE001
            logger.exception("StealStickers 启用失败")
            self.controller.deactivate()

    def on_unload(self) -> None:
        try:
            self.controller.deactivate()
        except Exception:  # noqa: BLE001
            logger.exception("StealStickers 停用时出错")
        logger.info("StealStickers 已停用")

    def _build_action(self, descriptor: StickerDescriptor) -> ActionEntry:
        return self.downloader.build_action(descriptor, self.dispatcher)


def build_default_plugin(
    settings: Settings | None = None,
    loop: asyncio.AbstractEventLoop | None = None,
) -> StealStickersPlugin:
    settings = settings or Settings()
    setup_logging(settings.log_level)
    return StealStickersPlugin(
        registry=ModuleScanRegistry(),
        patcher=Patcher(),
        notifier=LoggingNotifier(),
        sink=HttpDownloadSink(settings.download_dir, timeout=settings.download_timeout_seconds),
        url_opener=WebBrowserOpener() if settings.browser_fallback else None,
        settings=settings,
        loop=loop,
    )

import logging
import re

from stealstickers.core.models import ACTION_LABEL, ActionEntry, StickerDescriptor
from stealstickers.core.ports import DownloadSink, Notifier, UrlOpener
from stealstickers.services.dispatcher import TaskDispatcher
from stealstickers.utils.url_masking import mask_url

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def build_download_filename(descriptor: StickerDescriptor) -> str:
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", descriptor.display_name)
    return f"{safe_name}_{descriptor.id}.{descriptor.file_extension}"


class StickerDownloader:
    """下载贴纸并通过提示告知结果；失败不会重试也不会外抛。"""

    def __init__(
        self,
        sink: DownloadSink | None,
        notifier: Notifier,
        url_opener: UrlOpener | None = None,
    ) -> None:
        self._sink = sink
        self._notifier = notifier
        self._url_opener = url_opener

    async def download(self, descriptor: StickerDescriptor) -> None:
        filename = build_download_filename(descriptor)
        logger.debug(
            "开始下载贴纸: id=%s url=%s file=%s",
            descriptor.id,
            mask_url(descriptor.asset_url),
            filename,
        )
        try:
            if self._sink is not None:
                await self._sink.save(descriptor.asset_url, filename)
                logger.info("贴纸已保存: id=%s file=%s", descriptor.id, filename)
                self._notifier.notify(f"Downloaded {descriptor.display_name}! 📥")
                return

            if self._url_opener is not None:
                await self._url_opener.open(descriptor.asset_url)
                logger.info("已在浏览器中打开贴纸: id=%s", descriptor.id)
                self._notifier.notify("Opened sticker URL in browser 🌐")
                return

            logger.warning("当前环境既没有下载器也没有浏览器回退: id=%s", descriptor.id)
            self._notifier.notify("Download not supported on this platform ❌", "error")
        except Exception as exc:  # noqa: BLE001
            logger.exception("下载贴纸失败: id=%s", descriptor.id)
            self._notifier.notify(f"Failed to download sticker: {exc}", "error")

    def build_action(self, descriptor: StickerDescriptor, dispatcher: TaskDispatcher) -> ActionEntry:
        def on_activate() -> None:
            # 由宿主在点击时同步调用，调度失败也只能走提示
            try:
                dispatcher.dispatch(self.download(descriptor))
            except Exception as exc:  # noqa: BLE001
                logger.exception("调度下载任务失败: id=%s", descriptor.id)
                self._notifier.notify(f"Failed to download sticker: {exc}", "error")

        return ActionEntry(label=ACTION_LABEL, on_activate=on_activate)

import asyncio
import logging
import webbrowser

from stealstickers.utils.url_masking import mask_url

logger = logging.getLogger(__name__)


class WebBrowserOpener:
    """下载器不可用时的回退方案：交给系统浏览器打开。"""

    async def open(self, url: str) -> None:
        logger.debug("在浏览器中打开: %s", mask_url(url))
        opened = await asyncio.to_thread(webbrowser.open, url)
        if not opened:
            raise RuntimeError("没有可用的浏览器")

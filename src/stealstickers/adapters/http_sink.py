import asyncio
import logging
from pathlib import Path

import httpx

from stealstickers.core.errors import DownloadError
from stealstickers.utils.url_masking import mask_url

logger = logging.getLogger(__name__)


class HttpDownloadSink:
    """通过 HTTP 拉取贴纸并写入本地目录。"""

    def __init__(
        self,
        download_dir: str | Path,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._download_dir = Path(download_dir)
        self._timeout = timeout
        self._transport = transport

    async def save(self, url: str, filename: str) -> None:
        content = await self._fetch(url)
        path = self._download_dir / filename
        try:
            await asyncio.to_thread(_write_file, path, content)
        except OSError as exc:
            raise DownloadError(f"写入文件失败: {exc}") from exc
        logger.info("贴纸已写入: path=%s size=%s", path, len(content))

    async def _fetch(self, url: str) -> bytes:
        logger.debug("开始请求贴纸: url=%s", mask_url(url))
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as exc:
            raise DownloadError(f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise DownloadError(f"请求失败: {exc}") from exc


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)

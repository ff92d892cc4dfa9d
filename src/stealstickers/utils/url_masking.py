"""日志里输出 URL 时使用，去掉 query 等可能携带签名的部分。"""

from urllib.parse import urlparse

PATH_KEEP_HEAD = 24
PATH_KEEP_TAIL = 16


def mask_url(url: str) -> str:
    """
    仅保留协议、主机名和路径，过长的路径只保留首尾。
    解析失败或缺少协议、主机名时返回占位符。
    """
    try:
        parsed = urlparse(url)
    except (ValueError, TypeError, AttributeError):
        return "[url_masked]"

    if not parsed.scheme or not parsed.hostname:
        return "[url_masked]"

    path = parsed.path
    if len(path) > PATH_KEEP_HEAD + PATH_KEEP_TAIL:
        path = f"{path[:PATH_KEEP_HEAD]}...{path[-PATH_KEEP_TAIL:]}"
    return f"{parsed.scheme}://{parsed.hostname}{path}"

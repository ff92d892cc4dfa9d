class StealStickersError(Exception):
    """插件内部错误的基类。"""


class NoPatchableMethodError(StealStickersError):
    """目标模块上找不到可拦截的方法。"""


class DownloadError(StealStickersError):
    """贴纸下载失败。"""

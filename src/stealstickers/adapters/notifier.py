import logging
from collections import deque

from stealstickers.core.models import Severity

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """把提示写入日志，并保留最近的若干条。"""

    def __init__(self, history_size: int = 20) -> None:
        self.history: deque[tuple[str, Severity | None]] = deque(maxlen=history_size)

    def notify(self, message: str, severity: Severity | None = None) -> None:
        self.history.append((message, severity))
        if severity == "error":
            logger.error("[toast] %s", message)
        else:
            logger.info("[toast] %s", message)

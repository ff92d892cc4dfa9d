import logging
from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
# 每次下载都会产生请求级日志，默认压到 WARNING
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

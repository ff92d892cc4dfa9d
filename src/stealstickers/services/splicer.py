import logging
from collections.abc import MutableSequence
from typing import Any

from stealstickers.services.extractor import get_field, is_sequence

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10
OPTIONS_FIELD = "options"
CHILDREN_FIELD = "children"


def is_appendable(value: Any) -> bool:
    return isinstance(value, MutableSequence) and not isinstance(value, bytearray)


def splice(root: Any, entry: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """
    在任意输出树中找到第一个可追加的 options 列表并追加 entry。

    先序遍历，深度超过 max_depth 即停止；整棵树最多只注入一次。
    找不到时返回 False，不会为宿主新建列表。
    """
    if is_appendable(root):
        # 宿主直接返回操作列表本身
        root.append(entry)
        return True

    if _search(root, entry, depth=0, max_depth=max_depth):
        return True

    logger.debug("输出中未找到 options 列表，保持原样: type=%s", type(root).__name__)
    return False


def _node_field(node: Any, name: str) -> Any:
    value = get_field(node, name)
    if value is None:
        value = get_field(get_field(node, "props"), name)
    return value


def _search(node: Any, entry: Any, depth: int, max_depth: int) -> bool:
    if node is None or depth > max_depth:
        return False
    if isinstance(node, (str, bytes, bytearray)):
        return False

    options = _node_field(node, OPTIONS_FIELD)
    if is_appendable(options):
        options.append(entry)
        logger.debug("已注入操作项: depth=%s", depth)
        return True

    children = _node_field(node, CHILDREN_FIELD)
    if children is None:
        return False
    if is_sequence(children):
        return any(_search(child, entry, depth + 1, max_depth) for child in children)
    return _search(children, entry, depth + 1, max_depth)

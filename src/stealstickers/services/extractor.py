import logging
from collections.abc import Mapping, Sequence
from typing import Any

from stealstickers.core.models import DEFAULT_STICKER_NAME, StickerDescriptor, StickerFormat

logger = logging.getLogger(__name__)

# 依次尝试的贴纸列表字段，驼峰写法优先于下划线写法
STICKER_COLLECTION_FIELDS = ("stickerItems", "sticker_items", "stickers")
_FORMAT_FIELDS = ("format_type", "formatType")


def get_field(obj: Any, name: str) -> Any:
    """结构化读取字段：映射优先按键读取，否则按属性读取。"""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    try:
        return getattr(obj, name, None)
    except Exception:  # noqa: BLE001
        # 宿主对象的 property 可能在读取时抛错，按缺失处理
        return None


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def extract(raw: Any) -> StickerDescriptor | None:
    """
    从形状不确定的输入中提取贴纸信息，按固定优先级尝试：
    1. 输入本身就是贴纸
    2. 输入的 sticker 字段
    3. stickerItems / sticker_items 列表的第一个元素
    4. stickers 列表的第一个元素
    都不匹配时返回 None，表示当前调用与贴纸无关。
    """
    if raw is None:
        return None

    descriptor = _from_record(raw)
    if descriptor:
        return descriptor

    descriptor = _from_record(get_field(raw, "sticker"))
    if descriptor:
        return descriptor

    for field_name in STICKER_COLLECTION_FIELDS:
        items = get_field(raw, field_name)
        if is_sequence(items) and len(items) > 0:
            descriptor = _from_record(items[0])
            if descriptor:
                logger.debug("从列表字段提取到贴纸: field=%s id=%s", field_name, descriptor.id)
                return descriptor

    return None


def parse_format(value: Any) -> StickerFormat:
    """未知或缺失的格式一律视为静态贴纸。"""
    if isinstance(value, StickerFormat):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return StickerFormat.STATIC
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        return StickerFormat.STATIC
    try:
        return StickerFormat(value)
    except ValueError:
        return StickerFormat.STATIC


def _from_record(record: Any) -> StickerDescriptor | None:
    if record is None or isinstance(record, (str, bytes)):
        return None

    sticker_id = get_field(record, "id")
    if sticker_id is None or sticker_id == "":
        return None

    format_value = None
    for field_name in _FORMAT_FIELDS:
        format_value = get_field(record, field_name)
        if format_value is not None:
            break
    if format_value is None:
        return None

    name = get_field(record, "name")
    return StickerDescriptor(
        id=str(sticker_id),
        display_name=str(name) if name else DEFAULT_STICKER_NAME,
        format_kind=parse_format(format_value),
    )

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Literal

StrategyKind = Literal["name", "props"]
Severity = Literal["info", "error"]

STICKER_CDN_URL_TEMPLATE = "https://cdn.discordapp.com/stickers/{id}.{extension}"
DEFAULT_STICKER_NAME = "sticker"
ACTION_KEY = "stealSticker"
ACTION_LABEL = "📥 Download Sticker"


class StickerFormat(IntEnum):
    """贴纸格式，取值与宿主 format_type 一致。"""

    STATIC = 1
    ANIMATED_PNG = 2
    VECTOR_ANIMATION = 3
    ANIMATED_GIF = 4


FORMAT_EXTENSIONS: dict[StickerFormat, str] = {
    StickerFormat.STATIC: "png",
    StickerFormat.ANIMATED_PNG: "apng",
    StickerFormat.VECTOR_ANIMATION: "json",
    StickerFormat.ANIMATED_GIF: "gif",
}


def build_sticker_url(sticker_id: str, extension: str) -> str:
    return STICKER_CDN_URL_TEMPLATE.format(id=sticker_id, extension=extension)


@dataclass(frozen=True, slots=True)
class StickerDescriptor:
    id: str
    display_name: str = DEFAULT_STICKER_NAME
    format_kind: StickerFormat = StickerFormat.STATIC

    @property
    def file_extension(self) -> str:
        return FORMAT_EXTENSIONS[self.format_kind]

    @property
    def asset_url(self) -> str:
        return build_sticker_url(self.id, self.file_extension)


@dataclass(frozen=True, slots=True)
class ActionEntry:
    """注入到宿主菜单里的操作项，on_activate 由用户点击时触发。"""

    label: str
    on_activate: Callable[[], Any] = field(repr=False)
    key: str = ACTION_KEY

    @property
    def on_press(self) -> Callable[[], Any]:
        return self.on_activate


@dataclass(frozen=True, slots=True)
class ResolvedTarget:
    module: Any = field(repr=False)
    strategy: StrategyKind
    lookup: str

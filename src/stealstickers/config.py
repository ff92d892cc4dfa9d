from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    download_dir: str = Field(
        default="downloads/stickers",
        alias="STICKER_DOWNLOAD_DIR",
    )
    download_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        alias="STICKER_DOWNLOAD_TIMEOUT_SECONDS",
    )
    splice_max_depth: int = Field(
        default=10,
        ge=1,
        le=64,
        alias="STICKER_SPLICE_MAX_DEPTH",
        description="在宿主返回的菜单树中查找 options 列表的最大深度。",
    )
    browser_fallback: bool = Field(
        default=True,
        alias="STICKER_BROWSER_FALLBACK",
        description="没有下载器时是否改为在浏览器中打开贴纸地址。",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

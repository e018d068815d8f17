"""
應用程式設定

使用 Pydantic BaseSettings 管理環境變數和配置
"""

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from stylizer.data_model import ChannelLayout


class AppSettings(BaseSettings):
    """
    應用程式設定

    從環境變數和 .env 文件讀取設定

    Attributes:
        log_level: 日誌級別 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        default_backend: 預設推論後端
        device: 計算設備（cuda/cpu/mps），None 則自動選擇
        resolution: 推論解析度
        model_path: 預設模型檔案
        content_input: 內容圖片對應的模型輸入名稱
        style_input: 風格圖片對應的模型輸入名稱
        channel_layout: 張量通道排列方式
        history_dir: 歷史記錄檔案所在目錄
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STYLIZER_",
        case_sensitive=False,
        extra="ignore",
    )

    # 日誌設定
    log_level: str = "INFO"

    # 推論設定
    default_backend: str = "onnx"
    device: str | None = None
    resolution: int = 512
    model_path: Path | None = None

    # 模型輸入綁定
    content_input: str = "0"
    style_input: str = "1"
    channel_layout: ChannelLayout = ChannelLayout.PLANAR

    # 歷史記錄
    history_dir: Path | None = None


def get_settings() -> AppSettings:
    """每次重新讀取環境變數"""
    return AppSettings()


def setup_logging(level: str | None = None) -> None:
    """
    設定日誌

    Args:
        level: 日誌級別名稱，None 則使用設定值
    """
    level_name = (level or get_settings().log_level).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level_value, format="%(message)s")

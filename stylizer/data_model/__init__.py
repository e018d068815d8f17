"""
資料模型模組

提供應用程式的核心資料結構，使用 Pydantic 進行驗證
"""

from .core import (
    SUPPORTED_EXTENSIONS,
    BackendInfo,
    BatchConfig,
    BatchResult,
    ChannelLayout,
    ModelSignature,
    TensorInfo,
    TransferConfig,
    TransferResult,
    is_supported_image,
)

__all__ = [
    "BackendInfo",
    "BatchConfig",
    "BatchResult",
    "ChannelLayout",
    "ModelSignature",
    "TensorInfo",
    "TransferConfig",
    "TransferResult",
    "SUPPORTED_EXTENSIONS",
    "is_supported_image",
]

"""
核心模組 - 定義介面、影像張量轉換和風格轉換流程
"""

from stylizer.data_model import BatchConfig, BatchResult, TransferConfig, TransferResult

from .interfaces import BackendProtocol, BaseBackend
from .processor import StyleBatchProcessor
from .transfer import StyleTransfer


__all__ = [
    "BackendProtocol",
    "BaseBackend",
    "BatchConfig",
    "BatchResult",
    "StyleBatchProcessor",
    "StyleTransfer",
    "TransferConfig",
    "TransferResult",
]
